"""
Réseau de neurones et de synapses.

Le réseau possède les neurones, les synapses, les paramètres, l'horloge et
la source aléatoire. Il maintient seul les index de connexions (synapses
entrantes et sortantes de chaque neurone): ni Neuron ni Synapse ne les
modifient.

Un pas de simulation:
1. Avance l'horloge de `dt`
2. Livre les transmissions échues de toutes les synapses
3. Met à jour le potentiel de tous les neurones

Les modifications de topologie ne sont permises qu'entre deux pas.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import logging

import numpy as np

from .clock import SimulationClock
from .errors import NeuronReferenceError
from .neuron import Neuron
from .params import ParameterSet
from .random_source import RandomSource
from .synapse import Synapse, check_synapse_values

logger = logging.getLogger("spikegraph.network")


# Tirage des synapses créées sans poids ni délai explicites
DEFAULT_MIN_STRENGTH = 0.3
DEFAULT_STRENGTH_SPAN = 0.7
DEFAULT_MIN_DELAY = 50.0
DEFAULT_DELAY_SPAN = 200.0


class Network:
    """Graphe de neurones à impulsions reliés par des synapses retardées."""

    def __init__(
        self,
        params: Optional[ParameterSet] = None,
        rng=None,
        clock: Optional[SimulationClock] = None
    ):
        """Initialise un réseau vide.

        Args:
            params: Paramètres de simulation
            rng: Source uniforme (méthode `uniform()`), RandomSource par défaut
            clock: Horloge de simulation
        """
        self.params = params or ParameterSet()
        self.rng = rng if rng is not None else RandomSource()
        self.clock = clock or SimulationClock()

        self._neurons: List[Neuron] = []
        self._synapses: List[Synapse] = []

        # Index de connexions: neurone -> synapses
        self._afferents: Dict[Neuron, List[Synapse]] = {}
        self._efferents: Dict[Neuron, List[Synapse]] = {}

        # Incrémenté à chaque changement de numérotation des neurones
        self._generation = 0
        self._stepping = False

        # Statistiques
        self._step_count = 0
        self._total_spikes = 0

    # ------------------------------------------------------------------
    # Accès en lecture
    # ------------------------------------------------------------------

    @property
    def now(self) -> float:
        """Temps simulé courant (ms)."""
        return self.clock.now

    @property
    def generation(self) -> int:
        """Génération de la numérotation; change quand des ids sont réattribués."""
        return self._generation

    @property
    def neuron_count(self) -> int:
        return len(self._neurons)

    @property
    def synapse_count(self) -> int:
        return len(self._synapses)

    @property
    def neurons(self) -> List[Neuron]:
        """Liste des neurones (copie), dans l'ordre des ids."""
        return list(self._neurons)

    @property
    def synapses(self) -> List[Synapse]:
        """Liste des synapses (copie), dans l'ordre de création."""
        return list(self._synapses)

    def neuron(self, neuron_id: int) -> Neuron:
        """Récupère un neurone par son id.

        Raises:
            NeuronReferenceError: Si l'id ne désigne aucun neurone
        """
        if isinstance(neuron_id, bool) or not isinstance(neuron_id, (int, np.integer)):
            raise NeuronReferenceError(f"Id de neurone invalide: {neuron_id!r}")
        if not 0 <= neuron_id < len(self._neurons):
            raise NeuronReferenceError(
                f"Neurone {neuron_id} inexistant ({len(self._neurons)} neurones)"
            )
        return self._neurons[neuron_id]

    def has_neuron(self, neuron_id: int) -> bool:
        try:
            self.neuron(neuron_id)
        except NeuronReferenceError:
            return False
        return True

    def incoming_synapses(self, neuron_id: int) -> List[Synapse]:
        """Synapses qui aboutissent au neurone."""
        return list(self._afferents[self.neuron(neuron_id)])

    def outgoing_synapses(self, neuron_id: int) -> List[Synapse]:
        """Synapses dont le neurone est la source."""
        return list(self._efferents[self.neuron(neuron_id)])

    def find_synapse(self, from_id: int, to_id: int) -> Optional[Synapse]:
        """Première synapse de `from_id` vers `to_id`, ou None."""
        target = self.neuron(to_id)
        for synapse in self._efferents[self.neuron(from_id)]:
            if synapse.target is target:
                return synapse
        return None

    def potentials(self) -> np.ndarray:
        """Potentiels de tous les neurones, indexés par id."""
        return np.array([n.potential for n in self._neurons], dtype=np.float64)

    def positions(self) -> np.ndarray:
        """Coordonnées (N, 2) de tous les neurones."""
        if not self._neurons:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([n.position for n in self._neurons], dtype=np.float64)

    def refractory_mask(self) -> np.ndarray:
        """Masque booléen des neurones réfractaires au temps courant."""
        now = self.clock.now
        return np.array([n.is_refractory(now) for n in self._neurons], dtype=bool)

    # ------------------------------------------------------------------
    # Topologie
    # ------------------------------------------------------------------

    def _check_mutable(self):
        if self._stepping:
            raise RuntimeError("Modification de topologie pendant un pas de simulation")

    def add_neuron(self, x: float = 0.0, y: float = 0.0) -> int:
        """Ajoute un neurone et retourne son id."""
        self._check_mutable()

        neuron = Neuron(neuron_id=len(self._neurons), x=float(x), y=float(y))
        self._neurons.append(neuron)
        self._afferents[neuron] = []
        self._efferents[neuron] = []

        logger.debug("Neurone %d ajouté en (%.1f, %.1f)", neuron.neuron_id, neuron.x, neuron.y)
        return neuron.neuron_id

    def remove_neuron(self, neuron_id: int):
        """Supprime un neurone et toutes ses synapses.

        Les neurones restants sont renumérotés 0..N-2: tout id conservé à
        l'extérieur devient invalide (voir `generation`).
        """
        self._check_mutable()
        neuron = self.neuron(neuron_id)

        incident = [
            s for s in self._synapses
            if s.source is neuron or s.target is neuron
        ]
        for synapse in incident:
            self._unlink(synapse)

        del self._afferents[neuron]
        del self._efferents[neuron]
        self._neurons.remove(neuron)
        self._renumber()

        logger.debug(
            "Neurone %d supprimé avec %d synapse(s)", neuron_id, len(incident)
        )

    def add_synapse(
        self,
        from_id: int,
        to_id: int,
        strength: Optional[float] = None,
        delay: Optional[float] = None
    ) -> Synapse:
        """Crée une synapse de `from_id` vers `to_id`.

        Args:
            from_id: Id du neurone source
            to_id: Id du neurone cible
            strength: Poids (tiré dans [0.3, 1.0) si absent)
            delay: Délai en ms (tiré dans [50, 250) si absent)

        Returns:
            Synapse créée

        Raises:
            NeuronReferenceError: Id inconnu ou auto-connexion
            ValueError: Poids hors de (0, 1] ou délai négatif ou non fini
        """
        self._check_mutable()
        source = self.neuron(from_id)
        target = self.neuron(to_id)
        if source is target:
            raise NeuronReferenceError(f"Auto-connexion refusée sur le neurone {from_id}")

        if strength is None:
            strength = DEFAULT_MIN_STRENGTH + self.rng.uniform() * DEFAULT_STRENGTH_SPAN
        if delay is None:
            delay = DEFAULT_MIN_DELAY + self.rng.uniform() * DEFAULT_DELAY_SPAN
        check_synapse_values(strength, delay)

        synapse = Synapse(source=source, target=target, strength=float(strength), delay=float(delay))
        self._link(synapse)

        logger.debug(
            "Synapse %d -> %d (force=%.3f, délai=%.1f ms)",
            from_id, to_id, synapse.strength, synapse.delay
        )
        return synapse

    def remove_synapse(self, synapse: Synapse):
        """Supprime une synapse du réseau et des index.

        Raises:
            NeuronReferenceError: Si la synapse n'appartient pas au réseau
        """
        self._check_mutable()
        if not any(s is synapse for s in self._synapses):
            raise NeuronReferenceError("Synapse absente du réseau")
        self._unlink(synapse)
        logger.debug("Synapse %d -> %d supprimée", synapse.source_id, synapse.target_id)

    def clear(self):
        """Supprime tous les neurones et synapses et remet l'horloge à zéro."""
        self._check_mutable()
        self._install([], [])
        self.clock.reset()
        self._step_count = 0
        self._total_spikes = 0

    def _link(self, synapse: Synapse):
        self._synapses.append(synapse)
        self._afferents[synapse.target].append(synapse)
        self._efferents[synapse.source].append(synapse)

    def _unlink(self, synapse: Synapse):
        self._synapses = [s for s in self._synapses if s is not synapse]
        self._afferents[synapse.target] = [
            s for s in self._afferents[synapse.target] if s is not synapse
        ]
        self._efferents[synapse.source] = [
            s for s in self._efferents[synapse.source] if s is not synapse
        ]

    def _renumber(self):
        for index, neuron in enumerate(self._neurons):
            neuron.neuron_id = index
        self._generation += 1

    def _install(self, neurons: Sequence[Neuron], synapses: Sequence[Synapse]):
        """Remplace tout le graphe et reconstruit les index."""
        self._neurons = list(neurons)
        self._synapses = []
        self._afferents = {n: [] for n in self._neurons}
        self._efferents = {n: [] for n in self._neurons}
        for synapse in synapses:
            self._link(synapse)
        self._renumber()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self, dt: float) -> List[int]:
        """Avance la simulation d'un pas.

        Les livraisons synaptiques précèdent toutes les mises à jour de
        potentiel, de sorte qu'une transmission échue à ce pas participe
        déjà à la décroissance et au test de seuil du même pas.

        Args:
            dt: Durée du pas (ms), positive ou nulle

        Returns:
            Ids des neurones ayant émis un spike pendant ce pas
        """
        now = self.clock.advance(dt)
        fired: List[int] = []

        self._stepping = True
        try:
            for synapse in self._synapses:
                synapse.deliver_due(now)

            for neuron in self._neurons:
                if neuron.update_potential(
                    self.params, dt, now, self.rng, self._efferents[neuron]
                ):
                    fired.append(neuron.neuron_id)
        finally:
            self._stepping = False

        self._step_count += 1
        self._total_spikes += len(fired)
        return fired

    def run(self, dt: float, steps: int) -> List[List[int]]:
        """Enchaîne `steps` pas de durée `dt`; retourne les spikes de chaque pas."""
        return [self.step(dt) for _ in range(steps)]

    def stimulate(self, neuron_id: int, amount: float):
        """Injecte directement `amount` dans le potentiel d'un neurone.

        L'effet (éventuel spike) est évalué au prochain pas.
        """
        self._check_mutable()
        self.neuron(neuron_id).receive(amount)

    def fire_neuron(self, neuron_id: int):
        """Force un spike immédiat au temps courant."""
        self._check_mutable()
        neuron = self.neuron(neuron_id)
        neuron.fire(self.params, self.clock.now, self._efferents[neuron])
        self._total_spikes += 1

    def reset_state(self):
        """Remet tous les neurones au repos et vide les files de transmission.

        La topologie et les paramètres sont conservés; l'horloge repart de 0.
        """
        self._check_mutable()
        for neuron in self._neurons:
            neuron.reset()
        for synapse in self._synapses:
            synapse.clear()
        self.clock.reset()
        self._step_count = 0
        self._total_spikes = 0

    def decay_activity(self):
        """Atténue l'indicateur d'activité de toutes les synapses."""
        for synapse in self._synapses:
            synapse.decay_activity()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def export_snapshot(self) -> Dict[str, Any]:
        """Exporte le graphe et les paramètres au format snapshot."""
        from .snapshot import to_snapshot
        return to_snapshot(self)

    def import_snapshot(self, data: Mapping[str, Any]):
        """Remplace le graphe par celui du snapshot (opération atomique)."""
        from .snapshot import import_into
        import_into(self, data)

    def get_stats(self) -> dict:
        """Retourne les statistiques du réseau."""
        return {
            'neuron_count': self.neuron_count,
            'synapse_count': self.synapse_count,
            'pending_transmissions': sum(s.pending_count for s in self._synapses),
            'step_count': self._step_count,
            'total_spikes': self._total_spikes,
            'time': self.clock.now,
            'generation': self._generation,
        }


# Positions relatives et connexions du réseau de démonstration
DEMO_POSITIONS: Tuple[Tuple[float, float], ...] = (
    (0.25, 0.30),
    (0.75, 0.22),
    (0.80, 0.60),
    (0.56, 0.82),
    (0.18, 0.75),
    (0.45, 0.45),
)

DEMO_CONNECTIONS: Tuple[Tuple[int, int], ...] = (
    (0, 1),
    (1, 2),
    (2, 3),
    (3, 4),
    (4, 0),
    (1, 5),
    (5, 3),
    (0, 5),
)


def build_demo_network(
    width: float = 800.0,
    height: float = 600.0,
    params: Optional[ParameterSet] = None,
    rng=None
) -> Network:
    """Construit le réseau de démonstration (6 neurones, 8 synapses).

    Un anneau 0→1→2→3→4→0 avec un neurone central (5) alimenté par 0 et 1
    et projetant sur 3. Poids et délais sont tirés de la source aléatoire.

    Args:
        width: Largeur de la zone d'affichage
        height: Hauteur de la zone d'affichage
        params: Paramètres de simulation
        rng: Source uniforme

    Returns:
        Nouveau réseau
    """
    network = Network(params=params, rng=rng)
    for fx, fy in DEMO_POSITIONS:
        network.add_neuron(width * fx, height * fy)
    for from_id, to_id in DEMO_CONNECTIONS:
        network.add_synapse(from_id, to_id)
    return network
