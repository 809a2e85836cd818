"""Building blocks for subgraph isomorphism solvers: search control, verification, proof logging and result tables."""

__version__ = "0.1.0"