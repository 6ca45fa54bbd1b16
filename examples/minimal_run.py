from spikegraph import build_demo_network, RandomSource


def main() -> None:
    network = build_demo_network(rng=RandomSource(seed=0))
    network.fire_neuron(0)
    for _ in range(120):
        fired = network.step(16.0)
        if fired:
            print(f"t={network.now:7.1f} ms  spikes: {fired}")


if __name__ == "__main__":
    main()
