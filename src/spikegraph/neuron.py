"""
Neurone à accumulation de potentiel avec période réfractaire.

Dynamique par pas de temps (Euler explicite):
- Un neurone réfractaire garde un potentiel nul
- Impulsion spontanée avec probabilité `spontaneous_rate * dt`
- Bruit centré d'amplitude `noise_level * dt`
- Décroissance `potential *= 1 - decay_rate * dt`
- Spike si le potentiel atteint le seuil, puis écrêtage dans [0, 1.5 × seuil]

L'horloge et les délais sont en millisecondes, les taux (décroissance,
bruit, impulsions spontanées) sont exprimés par seconde.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Optional, TYPE_CHECKING

from .params import ParameterSet

if TYPE_CHECKING:
    from .synapse import Synapse


# Conversion ms (horloge) -> s (taux)
RATE_TIME_SCALE = 1e-3

# Fraction de `synaptic_strength` ajoutée par une impulsion spontanée
SPONTANEOUS_IMPULSE = 0.5


class NeuronState(Enum):
    """État d'un neurone."""
    RESTING = auto()      # Intègre ses entrées
    REFRACTORY = auto()   # Ignore ses entrées jusqu'à refractory_until


@dataclass(eq=False)
class Neuron:
    """Un neurone du graphe.

    L'identité d'un neurone est celle de l'objet: deux neurones aux mêmes
    coordonnées restent distincts. `neuron_id` est sa position courante dans
    le réseau et peut changer lors d'une suppression.

    Attributes:
        neuron_id: Index contigu dans le réseau (0..N-1)
        x: Abscisse (présentation uniquement)
        y: Ordonnée (présentation uniquement)
    """
    neuron_id: int
    x: float = 0.0
    y: float = 0.0

    # État interne
    potential: float = field(default=0.0, init=False)
    last_fired_at: Optional[float] = field(default=None, init=False)
    refractory_until: float = field(default=0.0, init=False)

    # Statistiques
    total_spikes: int = field(default=0, init=False)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def has_fired(self) -> bool:
        return self.last_fired_at is not None

    def is_refractory(self, now: float) -> bool:
        return now < self.refractory_until

    def state(self, now: float) -> NeuronState:
        """État du neurone au temps `now`.

        La sortie de la période réfractaire est paresseuse: elle n'est
        constatée qu'en comparant `now` à `refractory_until`.
        """
        if self.is_refractory(now):
            return NeuronState.REFRACTORY
        return NeuronState.RESTING

    def receive(self, amount: float):
        """Ajoute une entrée synaptique au potentiel."""
        self.potential += amount

    def update_potential(
        self,
        params: ParameterSet,
        dt: float,
        now: float,
        rng,
        outgoing: Iterable["Synapse"] = ()
    ) -> bool:
        """Intègre les termes intrinsèques et décide du spike.

        Les entrées synaptiques ont déjà été ajoutées au potentiel par les
        synapses avant cet appel.

        Args:
            params: Paramètres de simulation
            dt: Durée du pas (ms); `decay_rate * dt` doit rester dans [0, 1]
            now: Temps courant de l'horloge (ms)
            rng: Source uniforme (méthode `uniform()`)
            outgoing: Synapses dont ce neurone est la source

        Returns:
            True si le neurone a émis un spike
        """
        if self.is_refractory(now):
            self.potential = 0.0
            return False

        dt_s = dt * RATE_TIME_SCALE

        if rng.uniform() < params.spontaneous_rate * dt_s:
            self.potential += params.synaptic_strength * SPONTANEOUS_IMPULSE

        self.potential += (rng.uniform() - 0.5) * params.noise_level * dt_s

        self.potential *= (1.0 - params.decay_rate * dt_s)

        fired = False
        if self.potential >= params.threshold:
            self.fire(params, now, outgoing)
            fired = True

        self.potential = max(0.0, min(self.potential, params.max_potential))
        return fired

    def fire(self, params: ParameterSet, now: float, outgoing: Iterable["Synapse"] = ()):
        """Émet un spike et programme les transmissions sortantes.

        Le potentiel des neurones cibles n'est pas modifié ici: chaque
        synapse le fera à l'échéance de son délai.
        """
        self.last_fired_at = now
        self.refractory_until = now + params.refractory_period
        self.potential = 0.0
        self.total_spikes += 1

        for synapse in outgoing:
            synapse.transmit(params, now)

    def reset(self):
        """Réinitialise l'état dynamique (au repos, sans historique)."""
        self.potential = 0.0
        self.last_fired_at = None
        self.refractory_until = 0.0
        self.total_spikes = 0
