"""
Pilotage d'une simulation par horodatages externes.

Le runner remplace la boucle d'animation: l'appelant (callback d'image,
timer, script) fournit un horodatage à chaque image et le runner en déduit
le `dt` à simuler, multiplié par `speed_multiplier`. Aucun thread, aucune
planification: sans appel à `tick`, rien ne se passe.
"""

from __future__ import annotations

from typing import Callable, List, Optional
import logging

from .network import Network, build_demo_network

logger = logging.getLogger("spikegraph.runner")


class SimulationRunner:
    """Démarrage, pause, reprise et réinitialisation d'un réseau."""

    def __init__(
        self,
        network: Optional[Network] = None,
        factory: Optional[Callable[[], Network]] = None
    ):
        """Initialise le runner.

        Args:
            network: Réseau piloté (construit par `factory` si absent)
            factory: Constructeur utilisé par `reset` (réseau de démo par défaut)
        """
        self.factory = factory or build_demo_network
        self.network = network if network is not None else self.factory()

        self._running = False
        self._paused = False
        self._last_timestamp: Optional[float] = None

        self._frame_count = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def active(self) -> bool:
        """True si `tick` fait avancer la simulation."""
        return self._running and not self._paused

    def start(self):
        """Démarre la simulation en chargeant le premier neurone au seuil."""
        if self._running:
            return
        self._running = True
        self._paused = False
        self._last_timestamp = None

        if self.network.neuron_count:
            self.network.neuron(0).potential = self.network.params.threshold

        logger.info("Simulation démarrée (%d neurones)", self.network.neuron_count)

    def pause(self):
        self._paused = True

    def resume(self):
        """Reprend après une pause; le temps écoulé pendant la pause est ignoré."""
        if not self._running:
            return
        self._paused = False
        self._last_timestamp = None

    def reset(self):
        """Arrête la simulation et reconstruit le réseau."""
        self._running = False
        self._paused = False
        self._last_timestamp = None
        self._frame_count = 0
        self.network = self.factory()
        logger.info("Simulation réinitialisée")

    def tick(self, timestamp: float) -> List[int]:
        """Avance la simulation jusqu'à l'horodatage `timestamp` (ms).

        Le premier tick après `start` ou `resume` sert de référence et
        simule un pas nul. Un horodatage antérieur au précédent est traité
        comme un pas nul.

        Args:
            timestamp: Temps réel courant (ms)

        Returns:
            Ids des neurones ayant émis un spike
        """
        if not self.active:
            return []

        if self._last_timestamp is None:
            self._last_timestamp = timestamp

        elapsed = max(0.0, timestamp - self._last_timestamp)
        self._last_timestamp = timestamp

        dt = elapsed * self.network.params.speed_multiplier
        fired = self.network.step(dt)
        self.network.decay_activity()

        self._frame_count += 1
        return fired

    def get_stats(self) -> dict:
        return {
            'running': self._running,
            'paused': self._paused,
            'frame_count': self._frame_count,
            **self.network.get_stats()
        }
