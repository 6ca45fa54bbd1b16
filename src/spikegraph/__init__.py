"""
SpikeGraph - Petit graphe de neurones à impulsions avec synapses retardées.

Noyau de simulation piloté pas à pas, sans rendu: l'appelant fournit `dt`,
lit l'état des neurones et applique les modifications de topologie entre
deux pas.
"""

__all__ = [
    # Erreurs
    "SpikeGraphError",
    "ParseError",
    "NeuronReferenceError",
    "ConfigError",
    # Paramètres, horloge, hasard
    "ParameterSet",
    "SimulationClock",
    "RandomSource",
    "SequenceRandomSource",
    # Neurones et synapses
    "Neuron",
    "NeuronState",
    "Synapse",
    "Transmission",
    # Réseau
    "Network",
    "build_demo_network",
    # Snapshots
    "to_snapshot",
    "from_snapshot",
    "dumps",
    "loads",
    "save",
    "load",
    # Pilotage
    "SimulationRunner",
]

from .errors import SpikeGraphError, ParseError, NeuronReferenceError, ConfigError
from .params import ParameterSet
from .clock import SimulationClock
from .random_source import RandomSource, SequenceRandomSource
from .neuron import Neuron, NeuronState
from .synapse import Synapse, Transmission
from .network import Network, build_demo_network
from .snapshot import to_snapshot, from_snapshot, dumps, loads, save, load
from .runner import SimulationRunner
