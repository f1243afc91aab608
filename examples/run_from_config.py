#!/usr/bin/env python
"""
Example: run a simulation described by a YAML configuration.

The YAML mapping may hold any RunConfig field, e.g.

    n_blocks: 5
    n_steps: 100
    dt: 0.002
    shell_cutoffs: [1.5, 2.0, 2.5]
    n_mts: [1, 2, 2]

A configuration file in the plain-text cnf format can be given as a
starting point; otherwise a jittered lattice is used.

Usage:
    python examples/run_from_config.py run.yaml [cnf.inp]
"""

import sys

from shearmd import RunConfig, plotting, setup_logging, simulate
from shearmd.io import CnfReader


def main():
    setup_logging()
    config = RunConfig.from_yaml(sys.argv[1])

    state = None
    if len(sys.argv) > 2:
        state = simulate.state_from_reader(CnfReader(sys.argv[2]), seed=config.seed)

    result = simulate.run(config, state=state, output_dir=".")

    if plotting.HAS_MATPLOTLIB:
        plotting.observables(result, show=False)
        plotting.save("observables.png")


if __name__ == "__main__":
    main()
