"""Horloge de simulation explicite (en millisecondes)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SimulationClock:
    """Temps simulé, avancé uniquement par le réseau propriétaire.

    Attributes:
        now: Temps courant (ms)
    """
    now: float = 0.0

    def advance(self, dt: float) -> float:
        """Avance l'horloge de `dt` ms et retourne le nouveau temps."""
        if dt < 0:
            raise ValueError(f"dt négatif: {dt}")
        self.now += dt
        return self.now

    def reset(self):
        self.now = 0.0
