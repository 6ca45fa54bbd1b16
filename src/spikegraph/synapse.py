"""
Synapses à transmission retardée.

Un spike du neurone source n'affecte pas immédiatement la cible: la
synapse met en file une transmission qui sera livrée une fois son délai
écoulé. Plusieurs transmissions peuvent être en vol simultanément sur la
même synapse, d'où une file plutôt qu'un scalaire.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, NamedTuple
import math

from .neuron import Neuron
from .params import ParameterSet


# Facteur de décroissance par image de l'indicateur d'activité
ACTIVITY_DECAY = 0.95


def check_synapse_values(strength: float, delay: float):
    """Vérifie le poids et le délai d'une synapse.

    Raises:
        ValueError: Poids hors de (0, 1], délai négatif ou valeur non finie
    """
    if not math.isfinite(strength) or not 0.0 < strength <= 1.0:
        raise ValueError(f"strength doit être dans (0, 1], reçu {strength!r}")
    if not math.isfinite(delay) or delay < 0.0:
        raise ValueError(f"delay doit être fini et >= 0, reçu {delay!r}")


class Transmission(NamedTuple):
    """Transmission en attente de livraison.

    Attributes:
        sent_at: Temps du spike source (ms)
        delivery_time: sent_at + délai de la synapse (ms)
        strength: Quantité ajoutée au potentiel de la cible
    """
    sent_at: float
    delivery_time: float
    strength: float


@dataclass(eq=False)
class Synapse:
    """Connexion dirigée entre deux neurones d'un même réseau.

    Attributes:
        source: Neurone pré-synaptique
        target: Neurone post-synaptique
        strength: Poids dans (0, 1]
        delay: Délai de transmission (ms)
    """
    source: Neuron
    target: Neuron
    strength: float
    delay: float

    pending: Deque[Transmission] = field(default_factory=deque, init=False, repr=False)
    activity: float = field(default=0.0, init=False)

    # Statistiques
    total_transmitted: int = field(default=0, init=False)
    total_delivered: int = field(default=0, init=False)

    @property
    def source_id(self) -> int:
        return self.source.neuron_id

    @property
    def target_id(self) -> int:
        return self.target.neuron_id

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    def transmit(self, params: ParameterSet, now: float):
        """Programme une livraison à `now + delay`."""
        self.pending.append(Transmission(
            sent_at=now,
            delivery_time=now + self.delay,
            strength=self.strength * params.synaptic_strength,
        ))
        self.activity = 1.0
        self.total_transmitted += 1

    def deliver_due(self, now: float) -> float:
        """Livre à la cible toutes les transmissions échues.

        Chaque transmission est livrée une seule fois; celles qui ne sont pas
        encore échues restent en file dans leur ordre d'insertion.

        Args:
            now: Temps courant (ms)

        Returns:
            Somme des forces livrées
        """
        if not self.pending:
            return 0.0

        delivered = 0.0
        kept: Deque[Transmission] = deque()
        for transmission in self.pending:
            if now >= transmission.delivery_time:
                self.target.receive(transmission.strength)
                delivered += transmission.strength
                self.total_delivered += 1
            else:
                kept.append(transmission)

        self.pending = kept
        return delivered

    def pending_progress(self, now: float) -> List[float]:
        """Avancement [0-1] de chaque transmission en vol.

        Sert au rendu (position d'une impulsion le long de la synapse).
        """
        if self.delay <= 0:
            return [1.0 for _ in self.pending]
        return [
            min(1.0, max(0.0, (now - t.sent_at) / self.delay))
            for t in self.pending
        ]

    def decay_activity(self, factor: float = ACTIVITY_DECAY):
        self.activity *= factor

    def clear(self):
        """Abandonne les transmissions en vol."""
        self.pending.clear()
        self.activity = 0.0
