"""
Erreurs du noyau de simulation.

Seules la construction du graphe et l'import de snapshots peuvent échouer;
le pas de simulation (`Network.step`) ne lève jamais d'exception.
"""


class SpikeGraphError(Exception):
    """Erreur de base du package."""


class ParseError(SpikeGraphError, ValueError):
    """Snapshot mal formé (structure ou types invalides)."""


class NeuronReferenceError(SpikeGraphError, LookupError):
    """Référence à un neurone absent, ou synapse invalide (auto-connexion)."""


class ConfigError(SpikeGraphError, ValueError):
    """Paramètre hors domaine (levée uniquement par `ParameterSet.validate`)."""
