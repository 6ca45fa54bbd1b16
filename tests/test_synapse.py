"""Tests pour les synapses à transmission retardée."""

import pytest

from spikegraph import Neuron, ParameterSet, Synapse, Transmission


def make_synapse(strength: float = 1.0, delay: float = 100.0) -> Synapse:
    return Synapse(
        source=Neuron(neuron_id=0),
        target=Neuron(neuron_id=1),
        strength=strength,
        delay=delay,
    )


class TestTransmit:
    """Tests de mise en file."""

    def test_transmit_appends_scaled_entry(self):
        """La transmission est pondérée par synaptic_strength."""
        synapse = make_synapse(strength=0.8, delay=120.0)

        synapse.transmit(ParameterSet(synaptic_strength=0.5), now=30.0)

        assert synapse.pending_count == 1
        entry = synapse.pending[0]
        assert isinstance(entry, Transmission)
        assert entry.sent_at == 30.0
        assert entry.delivery_time == 150.0
        assert entry.strength == pytest.approx(0.4)
        assert synapse.activity == 1.0

    def test_ids_follow_neurons(self):
        """Les ids suivent ceux des neurones référencés."""
        synapse = make_synapse()
        synapse.target.neuron_id = 7

        assert synapse.source_id == 0
        assert synapse.target_id == 7


class TestDeliverDue:
    """Tests de livraison."""

    def test_not_delivered_before_delay(self):
        """Rien n'est livré avant l'échéance, tout est livré après."""
        synapse = make_synapse(strength=1.0, delay=100.0)
        synapse.transmit(ParameterSet(synaptic_strength=1.0), now=0.0)

        assert synapse.deliver_due(50.0) == 0.0
        assert synapse.target.potential == 0.0
        assert synapse.pending_count == 1

        assert synapse.deliver_due(150.0) == pytest.approx(1.0)
        assert synapse.target.potential == pytest.approx(1.0)
        assert synapse.pending_count == 0

    def test_delivered_exactly_once(self):
        """Une transmission n'est livrée qu'une fois."""
        synapse = make_synapse(strength=1.0, delay=100.0)
        synapse.transmit(ParameterSet(synaptic_strength=1.0), now=0.0)

        synapse.deliver_due(100.0)
        synapse.deliver_due(200.0)

        assert synapse.target.potential == pytest.approx(1.0)
        assert synapse.total_delivered == 1

    def test_boundary_is_inclusive(self):
        """La livraison a lieu dès que now == delivery_time."""
        synapse = make_synapse(delay=100.0)
        synapse.transmit(ParameterSet(synaptic_strength=1.0), now=0.0)

        assert synapse.deliver_due(100.0) == pytest.approx(1.0)

    def test_concurrent_transmissions_keep_order(self):
        """Plusieurs transmissions en vol sont livrées dans l'ordre."""
        params = ParameterSet(synaptic_strength=1.0)
        synapse = make_synapse(strength=0.5, delay=100.0)
        synapse.transmit(params, now=0.0)
        synapse.transmit(params, now=30.0)

        synapse.deliver_due(110.0)

        assert synapse.target.potential == pytest.approx(0.5)
        assert [t.delivery_time for t in synapse.pending] == [130.0]

        synapse.deliver_due(130.0)

        assert synapse.target.potential == pytest.approx(1.0)
        assert synapse.pending_count == 0


class TestPresentation:
    """Tests des indicateurs destinés au rendu."""

    def test_pending_progress(self):
        """L'avancement suit la fraction du délai écoulée."""
        synapse = make_synapse(delay=100.0)
        synapse.transmit(ParameterSet(), now=0.0)
        synapse.transmit(ParameterSet(), now=50.0)

        assert synapse.pending_progress(75.0) == pytest.approx([0.75, 0.25])
        assert synapse.pending_progress(500.0) == [1.0, 1.0]

    def test_activity_decay(self):
        """L'activité décroît après une transmission."""
        synapse = make_synapse()
        synapse.transmit(ParameterSet(), now=0.0)

        synapse.decay_activity()

        assert synapse.activity == pytest.approx(0.95)

    def test_clear(self):
        """clear abandonne les transmissions en vol."""
        synapse = make_synapse()
        synapse.transmit(ParameterSet(), now=0.0)

        synapse.clear()

        assert synapse.pending_count == 0
        assert synapse.deliver_due(1000.0) == 0.0
        assert synapse.target.potential == 0.0
