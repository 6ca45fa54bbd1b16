#!/usr/bin/env python3
"""
Simulation sans rendu d'un réseau SpikeGraph.

Charge un snapshot JSON (ou le réseau de démonstration), simule un nombre
donné d'images et affiche un raster des spikes. Le réseau peut être
exporté à la fin pour être rechargé dans l'interface.
"""

import argparse
import sys

from spikegraph import (
    ParseError,
    NeuronReferenceError,
    RandomSource,
    SimulationRunner,
    build_demo_network,
    load,
    save,
)


def print_raster(history, neuron_count: int, width: int = 80):
    """Affiche un raster texte: une ligne par neurone, une colonne par image."""
    frames = history[-width:]
    for neuron_id in range(neuron_count):
        line = "".join("|" if neuron_id in fired else "." for fired in frames)
        print(f"N{neuron_id + 1:<3} {line}")


def main():
    parser = argparse.ArgumentParser(description='Simulation SpikeGraph sans rendu')
    parser.add_argument('-i', '--input', type=str, default=None,
                        help='Snapshot JSON à charger (défaut: réseau de démo)')
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Fichier JSON où exporter le réseau')
    parser.add_argument('-n', '--frames', type=int, default=300,
                        help='Nombre d\'images à simuler (défaut: 300)')
    parser.add_argument('--fps', type=float, default=60.0,
                        help='Images par seconde simulées (défaut: 60)')
    parser.add_argument('--speed', type=float, default=1.0,
                        help='Multiplicateur de vitesse (défaut: 1.0)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Graine aléatoire pour une exécution rejouable')
    args = parser.parse_args()

    rng = RandomSource(seed=args.seed)

    if args.input:
        def factory():
            return load(args.input, rng=rng)

        try:
            runner = SimulationRunner(factory=factory)
        except (ParseError, NeuronReferenceError) as e:
            print(f"Snapshot invalide: {e}", file=sys.stderr)
            return 1
    else:
        runner = SimulationRunner(factory=lambda: build_demo_network(rng=rng))

    network = runner.network
    network.params.speed_multiplier = args.speed

    print(f"Réseau: {network.neuron_count} neurones, {network.synapse_count} synapses")

    frame_ms = 1000.0 / args.fps
    runner.start()
    history = [runner.tick(frame * frame_ms) for frame in range(args.frames)]

    print_raster(history, network.neuron_count)

    stats = network.get_stats()
    print()
    print(f"Temps simulé: {stats['time']:.0f} ms")
    print(f"Spikes: {stats['total_spikes']}")
    print(f"Transmissions en vol: {stats['pending_transmissions']}")

    if args.output:
        path = save(network, args.output)
        print(f"Réseau exporté: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
