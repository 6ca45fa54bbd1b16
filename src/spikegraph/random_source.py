"""
Sources de valeurs aléatoires uniformes.

Le bruit et les impulsions spontanées consomment des tirages uniformes
dans [0, 1). La source est injectée dans le réseau: avec une graine fixe
(ou une séquence fixe) une simulation est rejouable à l'identique.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np


class RandomSource:
    """Source uniforme basée sur `numpy.random.Generator`."""

    def __init__(self, seed: Optional[int] = None):
        """Initialise la source.

        Args:
            seed: Graine du générateur (None = entropie du système)
        """
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        """Tire une valeur uniforme dans [0, 1)."""
        return float(self._rng.random())

    def reseed(self, seed: Optional[int] = None):
        """Redémarre la séquence à partir d'une nouvelle graine."""
        self.seed = seed
        self._rng = np.random.default_rng(seed)


class SequenceRandomSource:
    """Source déterministe qui rejoue une séquence fixe en boucle.

    Utile pour les tests: `SequenceRandomSource([0.5])` annule le bruit
    (tirage centré) et n'active jamais l'impulsion spontanée tant que
    `spontaneous_rate * dt < 0.5`.
    """

    def __init__(self, values: Iterable[float]):
        self.values = [float(v) for v in values]
        if not self.values:
            raise ValueError("La séquence de valeurs est vide")
        for v in self.values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Valeur hors de [0, 1): {v}")
        self._index = 0
        self.draws = 0

    def uniform(self) -> float:
        value = self.values[self._index]
        self._index = (self._index + 1) % len(self.values)
        self.draws += 1
        return value
