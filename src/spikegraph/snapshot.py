"""
Export et import JSON d'un réseau.

Format:
    {
      "neurons":  [{"x": float, "y": float, "id": int}, ...],
      "synapses": [{"from": int, "to": int, "strength": float, "delay": float}, ...],
      "params":   {"threshold": ..., "refractoryPeriod": ..., ...}
    }

`from`/`to` sont des index dans le tableau `neurons` tel qu'écrit. L'import
reconstruit les neurones, puis les synapses, puis les index de connexions,
et fusionne enfin `params` sur les paramètres existants. Tout est validé
avant installation: en cas d'erreur le réseau cible n'est pas modifié.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import json
import logging
import numbers

from .errors import NeuronReferenceError, ParseError
from .network import (
    DEFAULT_DELAY_SPAN,
    DEFAULT_MIN_DELAY,
    DEFAULT_MIN_STRENGTH,
    DEFAULT_STRENGTH_SPAN,
    Network,
)
from .neuron import Neuron
from .params import ParameterSet
from .synapse import Synapse, check_synapse_values

logger = logging.getLogger("spikegraph.snapshot")


def to_snapshot(network: Network) -> Dict[str, Any]:
    """Sérialise la topologie et les paramètres d'un réseau.

    L'état dynamique (potentiels, transmissions en vol) n'est pas exporté.
    """
    return {
        "neurons": [
            {"x": n.x, "y": n.y, "id": n.neuron_id}
            for n in network.neurons
        ],
        "synapses": [
            {
                "from": s.source_id,
                "to": s.target_id,
                "strength": s.strength,
                "delay": s.delay,
            }
            for s in network.synapses
        ],
        "params": network.params.to_dict(),
    }


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _require_list(data: Mapping[str, Any], key: str) -> list:
    if key not in data:
        raise ParseError(f"Clé manquante: {key!r}")
    value = data[key]
    if not isinstance(value, list):
        raise ParseError(f"{key!r} doit être une liste, reçu {type(value).__name__}")
    return value


def _parse_neurons(entries: list) -> List[Neuron]:
    neurons = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise ParseError(f"neurons[{index}] doit être un objet")
        for key in ("x", "y"):
            if not _is_number(entry.get(key)):
                raise ParseError(f"neurons[{index}].{key} doit être un nombre")
        if "id" in entry and not _is_integer(entry["id"]):
            raise ParseError(f"neurons[{index}].id doit être un entier")
        neurons.append(Neuron(neuron_id=index, x=float(entry["x"]), y=float(entry["y"])))
    return neurons


def _parse_synapses(entries: list, neurons: List[Neuron]) -> List[Tuple[Neuron, Neuron, Any, Any]]:
    """Valide les synapses sans tirage aléatoire.

    Returns:
        Liste (source, cible, poids ou None, délai ou None)
    """
    specs = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise ParseError(f"synapses[{index}] doit être un objet")

        endpoints = []
        for key in ("from", "to"):
            value = entry.get(key)
            if value is None:
                raise NeuronReferenceError(f"synapses[{index}].{key} manquant")
            if not _is_integer(value):
                raise ParseError(f"synapses[{index}].{key} doit être un entier")
            if not 0 <= value < len(neurons):
                raise NeuronReferenceError(
                    f"synapses[{index}].{key}={value} hors limites ({len(neurons)} neurones)"
                )
            endpoints.append(neurons[value])

        source, target = endpoints
        if source is target:
            raise NeuronReferenceError(f"synapses[{index}]: auto-connexion refusée")

        for key in ("strength", "delay"):
            if key in entry and not _is_number(entry[key]):
                raise ParseError(f"synapses[{index}].{key} doit être un nombre")

        strength = entry.get("strength")
        delay = entry.get("delay")
        try:
            check_synapse_values(
                DEFAULT_MIN_STRENGTH if strength is None else float(strength),
                DEFAULT_MIN_DELAY if delay is None else float(delay),
            )
        except ValueError as e:
            raise ParseError(f"synapses[{index}]: {e}") from e

        specs.append((source, target, strength, delay))
    return specs


def _build_synapses(specs, rng) -> List[Synapse]:
    """Crée les synapses validées; poids et délais absents sont tirés ici."""
    synapses = []
    for source, target, strength, delay in specs:
        if strength is None:
            strength = DEFAULT_MIN_STRENGTH + rng.uniform() * DEFAULT_STRENGTH_SPAN
        if delay is None:
            delay = DEFAULT_MIN_DELAY + rng.uniform() * DEFAULT_DELAY_SPAN
        synapses.append(Synapse(
            source=source,
            target=target,
            strength=float(strength),
            delay=float(delay),
        ))
    return synapses


def import_into(network: Network, data: Mapping[str, Any]):
    """Installe le contenu d'un snapshot dans un réseau existant.

    Args:
        network: Réseau cible (modifié seulement si l'import réussit)
        data: Snapshot décodé

    Raises:
        ParseError: Structure ou types invalides
        NeuronReferenceError: Index de neurone hors limites ou auto-connexion
    """
    network._check_mutable()
    if not isinstance(data, Mapping):
        raise ParseError(f"Le snapshot doit être un objet, reçu {type(data).__name__}")

    neurons = _parse_neurons(_require_list(data, "neurons"))
    specs = _parse_synapses(_require_list(data, "synapses"), neurons)

    raw_params = data.get("params")
    if raw_params is None:
        raw_params = {}
    params = network.params.merged(raw_params)

    # Aucun tirage avant que tout le snapshot soit validé
    synapses = _build_synapses(specs, network.rng)

    network._install(neurons, synapses)
    network.params = params

    logger.info(
        "Snapshot importé: %d neurones, %d synapses", len(neurons), len(synapses)
    )


def from_snapshot(
    data: Mapping[str, Any],
    params: Optional[ParameterSet] = None,
    rng=None
) -> Network:
    """Construit un nouveau réseau à partir d'un snapshot.

    Args:
        data: Snapshot décodé
        params: Paramètres de base sur lesquels `data["params"]` est fusionné
        rng: Source uniforme du nouveau réseau
    """
    network = Network(params=params, rng=rng)
    import_into(network, data)
    return network


def parse_json(text: Union[str, bytes]) -> Dict[str, Any]:
    """Décode un texte JSON en snapshot brut.

    Raises:
        ParseError: JSON invalide
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"JSON invalide: {e}") from e


def dumps(network: Network, indent: Optional[int] = None) -> str:
    """Sérialise un réseau en texte JSON."""
    return json.dumps(to_snapshot(network), indent=indent)


def loads(text: Union[str, bytes], params: Optional[ParameterSet] = None, rng=None) -> Network:
    """Construit un réseau à partir d'un texte JSON."""
    return from_snapshot(parse_json(text), params=params, rng=rng)


def save(network: Network, path: Union[str, Path], indent: Optional[int] = 2) -> Path:
    """Écrit le snapshot d'un réseau dans un fichier JSON."""
    path = Path(path)
    path.write_text(dumps(network, indent=indent), encoding="utf-8")
    logger.info("Snapshot écrit: %s", path)
    return path


def load(path: Union[str, Path], params: Optional[ParameterSet] = None, rng=None) -> Network:
    """Lit un fichier JSON et construit le réseau correspondant."""
    path = Path(path)
    return loads(path.read_text(encoding="utf-8"), params=params, rng=rng)
