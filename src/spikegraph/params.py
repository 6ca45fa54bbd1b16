"""
Paramètres de simulation.

Un `ParameterSet` est une simple structure de données: aucune méthode de
la dynamique ne le modifie. Les clés utilisées dans les snapshots JSON sont
en camelCase et font partie du format d'échange.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping
import logging
import numbers

from .errors import ConfigError, ParseError

logger = logging.getLogger("spikegraph.params")


# Nom d'attribut -> clé de snapshot
SNAPSHOT_KEYS: Dict[str, str] = {
    "threshold": "threshold",
    "refractory_period": "refractoryPeriod",
    "decay_rate": "decayRate",
    "synaptic_strength": "synapticStrength",
    "noise_level": "noiseLevel",
    "spontaneous_rate": "spontaneousRate",
    "speed_multiplier": "speedMultiplier",
}

# Le multiplicateur de vitesse concerne la boucle d'animation, pas le réseau
EXPORTED_FIELDS = (
    "threshold",
    "refractory_period",
    "decay_rate",
    "synaptic_strength",
    "noise_level",
    "spontaneous_rate",
)

_FIELD_BY_KEY = {key: name for name, key in SNAPSHOT_KEYS.items()}


@dataclass
class ParameterSet:
    """Constantes de la simulation.

    Attributes:
        threshold: Potentiel à partir duquel un neurone émet un spike
        refractory_period: Durée réfractaire après un spike (ms)
        decay_rate: Fraction du potentiel dissipée par seconde
        synaptic_strength: Gain global appliqué aux transmissions
        noise_level: Amplitude du bruit (par seconde)
        spontaneous_rate: Probabilité d'impulsion spontanée par seconde
        speed_multiplier: Accélération du temps simulé par rapport au temps réel
    """
    threshold: float = 1.0
    refractory_period: float = 500.0
    decay_rate: float = 0.05
    synaptic_strength: float = 0.5
    noise_level: float = 0.02
    spontaneous_rate: float = 0.01
    speed_multiplier: float = 1.0

    @property
    def max_potential(self) -> float:
        """Plafond du potentiel (1.5 × seuil)."""
        return self.threshold * 1.5

    def copy(self) -> "ParameterSet":
        return replace(self)

    def to_dict(self) -> Dict[str, float]:
        """Paramètres exportés, avec les clés du format snapshot."""
        return {SNAPSHOT_KEYS[name]: float(getattr(self, name)) for name in EXPORTED_FIELDS}

    def merged(self, values: Mapping[str, Any]) -> "ParameterSet":
        """Retourne une copie où les clés connues de `values` écrasent les valeurs.

        Les clés inconnues sont ignorées. Les valeurs non numériques
        provoquent une ParseError.

        Args:
            values: Dictionnaire indexé par clés snapshot (ou noms d'attributs)

        Returns:
            Nouveau ParameterSet
        """
        if not isinstance(values, Mapping):
            raise ParseError(f"params doit être un objet, reçu {type(values).__name__}")

        updates = {}
        for key, value in values.items():
            name = _FIELD_BY_KEY.get(key, key if key in SNAPSHOT_KEYS else None)
            if name is None:
                logger.warning("Paramètre inconnu ignoré: %r", key)
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ParseError(f"params.{key} doit être un nombre, reçu {value!r}")
            updates[name] = float(value)

        return replace(self, **updates)

    def validate(self) -> "ParameterSet":
        """Vérifie les domaines de valeurs.

        Le noyau n'appelle jamais cette méthode: les valeurs hors domaine
        sont acceptées telles quelles. Elle est destinée aux appelants qui
        veulent rejeter une configuration avant de l'appliquer.

        Raises:
            ConfigError: Si un paramètre est hors domaine
        """
        if self.threshold <= 0:
            raise ConfigError(f"threshold doit être > 0 (reçu {self.threshold})")
        for f in fields(self):
            if f.name != "threshold" and getattr(self, f.name) < 0:
                raise ConfigError(f"{f.name} doit être >= 0 (reçu {getattr(self, f.name)})")
        return self
