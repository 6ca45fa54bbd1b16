"""Tests pour les sources aléatoires."""

import pytest

from spikegraph import RandomSource, SequenceRandomSource


class TestRandomSource:
    """Tests pour RandomSource."""

    def test_range(self):
        """Les tirages sont dans [0, 1)."""
        rng = RandomSource(seed=0)

        values = [rng.uniform() for _ in range(1000)]

        assert all(0.0 <= v < 1.0 for v in values)
        assert all(isinstance(v, float) for v in values)

    def test_seed_reproducible(self):
        """Une même graine donne une même séquence."""
        a = RandomSource(seed=123)
        b = RandomSource(seed=123)

        assert [a.uniform() for _ in range(20)] == [b.uniform() for _ in range(20)]

    def test_reseed(self):
        """reseed redémarre la séquence."""
        rng = RandomSource(seed=5)
        first = [rng.uniform() for _ in range(5)]

        rng.reseed(5)

        assert [rng.uniform() for _ in range(5)] == first


class TestSequenceRandomSource:
    """Tests pour SequenceRandomSource."""

    def test_cycles(self):
        """La séquence est rejouée en boucle."""
        rng = SequenceRandomSource([0.1, 0.2])

        assert [rng.uniform() for _ in range(5)] == [0.1, 0.2, 0.1, 0.2, 0.1]
        assert rng.draws == 5

    def test_empty(self):
        """Une séquence vide est refusée."""
        with pytest.raises(ValueError):
            SequenceRandomSource([])

    def test_out_of_range(self):
        """Les valeurs hors de [0, 1) sont refusées."""
        with pytest.raises(ValueError):
            SequenceRandomSource([0.5, 1.0])
