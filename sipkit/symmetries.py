"""Finding pattern symmetry-breaking constraints by running GAP."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Protocol


class Graph(Protocol):
    """The graph operations that symmetry detection needs."""

    def size(self) -> int: ...

    def degree(self, v: int) -> int: ...

    def adjacent(self, a: int, b: int) -> bool: ...

    def vertex_name(self, v: int) -> str: ...


class GapFailed(Exception):
    """Raised when running GAP, or reading what it printed, goes wrong."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Running 'gap for symmetry detection failed: {message}")


def format_lad(graph: Graph) -> str:
    """Write ``graph`` in LAD format: a size line, then degree and neighbours."""
    n = graph.size()
    lines = [str(n)]
    for v in range(n):
        neighbours = (str(w) for w in range(n) if graph.adjacent(v, w))
        lines.append(" ".join([str(graph.degree(v)), *neighbours]))
    return "\n".join(lines) + "\n"


def _vertex(graph: Graph, text: str, arg: str) -> str:
    try:
        return graph.vertex_name(int(text))
    except (ValueError, IndexError) as exc:
        raise GapFailed(
            f"can't parse pattern-less-than '{arg}': bad vertex '{text}'"
        ) from exc


def parse_gap_output(output: str, graph: Graph) -> tuple[list[tuple[str, str]], str]:
    """Read GAP's option pairs into less-than constraints and a group size."""
    constraints: list[tuple[str, str]] = []
    size: str | None = None
    words = iter(output.split())
    for word, arg in zip(words, words):
        if word == "--pattern-automorphism-group-size":
            size = arg
        elif word == "--pattern-less-than":
            if len(arg) < 3 or arg[0] != "'" or arg[-1] != "'":
                raise GapFailed(f"can't parse pattern-less-than '{arg}': not quoted")
            arg = arg[1:-1]
            left, sep, right = arg.partition("<")
            if not sep:
                raise GapFailed(f"can't parse pattern-less-than '{arg}': no less than")
            constraints.append((_vertex(graph, left, arg), _vertex(graph, right, arg)))
        else:
            raise GapFailed(f"unknown option '{word}'")

    if size is None:
        raise GapFailed("parsing output failed")
    return constraints, size


def find_symmetries(argv0: str, graph: Graph) -> tuple[list[tuple[str, str]], str]:
    """Run GAP on ``graph`` and return its constraints and automorphism group size.

    The GAP helper script is looked for in ``gap/`` next to ``argv0``.
    """
    if sys.platform == "win32":
        raise GapFailed("Linking to GAP not supported on windows")

    helper = Path(argv0)
    if helper.name:
        helper = helper.parent / "gap" / "findDPfactorsOfGraphs.g"
    if not helper.exists():
        raise GapFailed(
            "couldn't find gap/findDPfactorsOfGraphs.g, which we need for symmetry detection"
        )

    try:
        completed = subprocess.run(
            ["gap", "-q", "-A", "-b", str(helper)],
            input=format_lad(graph),
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise GapFailed("exec gap failed") from exc
    except OSError as exc:
        raise GapFailed(f"running gap failed: {exc}") from exc

    return parse_gap_output(completed.stdout, graph)