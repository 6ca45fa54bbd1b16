"""Tests pour la dynamique des neurones."""

import pytest

from spikegraph import (
    Neuron,
    NeuronState,
    ParameterSet,
    SequenceRandomSource,
    Synapse,
)


def quiet_params(**overrides) -> ParameterSet:
    """Paramètres sans bruit, sans décroissance ni impulsion spontanée."""
    values = dict(decay_rate=0.0, noise_level=0.0, spontaneous_rate=0.0)
    values.update(overrides)
    return ParameterSet(**values)


class TestNeuronCreation:
    """Tests de création d'un neurone."""

    def test_initial_state(self):
        """Un neurone neuf est au repos avec un potentiel nul."""
        neuron = Neuron(neuron_id=0, x=10.0, y=20.0)

        assert neuron.potential == 0.0
        assert neuron.position == (10.0, 20.0)
        assert neuron.state(0.0) == NeuronState.RESTING
        assert not neuron.has_fired
        assert neuron.total_spikes == 0

    def test_identity_semantics(self):
        """Deux neurones identiques restent distincts."""
        a = Neuron(neuron_id=0)
        b = Neuron(neuron_id=0)

        assert a != b
        assert len({a, b}) == 2


class TestFire:
    """Tests du spike."""

    def test_fire_opens_refractory_window(self):
        """Le spike remet le potentiel à 0 et ouvre la période réfractaire."""
        params = ParameterSet(refractory_period=500.0)
        neuron = Neuron(neuron_id=0)
        neuron.potential = 0.8

        neuron.fire(params, now=100.0)

        assert neuron.potential == 0.0
        assert neuron.last_fired_at == 100.0
        assert neuron.refractory_until == 600.0
        assert neuron.refractory_until > neuron.last_fired_at
        assert neuron.total_spikes == 1

    def test_refractory_ends_lazily(self):
        """L'état réfractaire se termine à refractory_until."""
        params = ParameterSet(refractory_period=500.0)
        neuron = Neuron(neuron_id=0)
        neuron.fire(params, now=100.0)

        assert neuron.state(599.0) == NeuronState.REFRACTORY
        assert neuron.state(600.0) == NeuronState.RESTING

    def test_fire_schedules_without_touching_target(self):
        """Le spike met en file une transmission sans modifier la cible."""
        params = quiet_params(synaptic_strength=1.0)
        source = Neuron(neuron_id=0)
        target = Neuron(neuron_id=1)
        synapse = Synapse(source=source, target=target, strength=0.5, delay=100.0)

        source.fire(params, now=0.0, outgoing=[synapse])

        assert target.potential == 0.0
        assert synapse.pending_count == 1
        assert synapse.pending[0].delivery_time == 100.0


class TestUpdatePotential:
    """Tests de l'intégration du potentiel."""

    def test_refractory_forces_zero(self):
        """Un neurone réfractaire garde un potentiel nul et ne tire pas."""
        rng = SequenceRandomSource([0.5])
        neuron = Neuron(neuron_id=0)
        neuron.refractory_until = 1000.0
        neuron.potential = 0.7

        fired = neuron.update_potential(ParameterSet(), 16.0, 500.0, rng)

        assert not fired
        assert neuron.potential == 0.0
        assert rng.draws == 0

    def test_crossing_threshold_fires(self):
        """0.999 + 0.01 franchit un seuil de 1 et déclenche le spike."""
        params = quiet_params(threshold=1.0)
        neuron = Neuron(neuron_id=0)
        neuron.potential = 0.999
        neuron.receive(0.01)

        fired = neuron.update_potential(params, 16.0, 16.0, SequenceRandomSource([0.5]))

        assert fired
        assert neuron.potential == 0.0
        assert neuron.last_fired_at == 16.0
        assert neuron.refractory_until == 16.0 + params.refractory_period

    def test_below_threshold_does_not_fire(self):
        """Sous le seuil, le potentiel est conservé."""
        params = quiet_params(threshold=1.0)
        neuron = Neuron(neuron_id=0)
        neuron.potential = 0.6

        fired = neuron.update_potential(params, 16.0, 16.0, SequenceRandomSource([0.5]))

        assert not fired
        assert neuron.potential == pytest.approx(0.6)

    def test_decay(self):
        """La décroissance est proportionnelle à dt (en secondes)."""
        params = quiet_params(threshold=10.0, decay_rate=0.5)
        neuron = Neuron(neuron_id=0)
        neuron.potential = 1.0

        neuron.update_potential(params, 1000.0, 1000.0, SequenceRandomSource([0.5]))

        assert neuron.potential == pytest.approx(0.5)

    def test_noise(self):
        """Le bruit vaut (u - 0.5) × noise_level × dt."""
        params = quiet_params(threshold=10.0, noise_level=1.0)
        neuron = Neuron(neuron_id=0)

        neuron.update_potential(params, 1000.0, 1000.0, SequenceRandomSource([0.9]))

        assert neuron.potential == pytest.approx(0.4)

    def test_spontaneous_impulse(self):
        """Une impulsion spontanée ajoute la moitié de synaptic_strength."""
        params = quiet_params(threshold=10.0, spontaneous_rate=1.0, synaptic_strength=0.5)
        neuron = Neuron(neuron_id=0)

        # 0.1 < 1.0 × 0.5 s -> impulsion; 0.5 -> bruit nul
        neuron.update_potential(params, 500.0, 500.0, SequenceRandomSource([0.1, 0.5]))

        assert neuron.potential == pytest.approx(0.25)

    def test_negative_noise_clamped_to_zero(self):
        """Le potentiel ne descend jamais sous 0."""
        params = quiet_params(threshold=10.0, noise_level=1.0)
        neuron = Neuron(neuron_id=0)

        neuron.update_potential(params, 1000.0, 1000.0, SequenceRandomSource([0.0]))

        assert neuron.potential == 0.0

    def test_zero_dt_is_noop(self):
        """Un pas nul ne change pas un potentiel sous le seuil."""
        params = ParameterSet(noise_level=5.0, spontaneous_rate=100.0)
        neuron = Neuron(neuron_id=0)
        neuron.potential = 0.3

        neuron.update_potential(params, 0.0, 0.0, SequenceRandomSource([0.0, 0.99]))

        assert neuron.potential == pytest.approx(0.3)

    def test_reset(self):
        """reset efface l'historique de spikes."""
        neuron = Neuron(neuron_id=0)
        neuron.fire(ParameterSet(), now=10.0)

        neuron.reset()

        assert neuron.potential == 0.0
        assert neuron.last_fired_at is None
        assert neuron.state(10.0) == NeuronState.RESTING
