"""Checking that a claimed pattern-to-target mapping really is a solution."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class Graph(Protocol):
    """The graph operations that verification needs."""

    def size(self) -> int: ...

    def adjacent(self, a: int, b: int) -> bool: ...

    def vertex_name(self, v: int) -> str: ...

    def has_vertex_labels(self) -> bool: ...

    def vertex_label(self, v: int) -> str: ...


class BuggySolution(Exception):
    """Raised when a mapping does not satisfy the problem it claims to solve."""


def _name(graph: Graph, v: int) -> str:
    if 0 <= v < graph.size():
        return graph.vertex_name(v)
    return str(v)


def verify_homomorphism(
    pattern: Graph,
    target: Graph,
    injective: bool,
    locally_injective: bool,
    induced: bool,
    mapping: Mapping[int, int],
) -> None:
    """Raise :class:`BuggySolution` if ``mapping`` is not a valid solution.

    An empty mapping means no solution was claimed, so there is nothing to check.
    """
    if not mapping:
        return

    items = sorted(mapping.items())

    for i in range(pattern.size()):
        if i not in mapping:
            raise BuggySolution(f"No mapping for vertex {pattern.vertex_name(i)}")
        t = mapping[i]
        if t < 0 or t >= target.size():
            raise BuggySolution(
                f"Mapping {pattern.vertex_name(i)} -> {_name(target, t)} out of range"
            )

    for i, _ in items:
        if i < 0 or i >= pattern.size():
            raise BuggySolution(f"Vertex {_name(pattern, i)} out of range")

    if pattern.has_vertex_labels():
        for i in range(pattern.size()):
            if pattern.vertex_label(i) != target.vertex_label(mapping[i]):
                raise BuggySolution(
                    "Mismatched vertex label for assignment "
                    f"{pattern.vertex_name(i)} -> {target.vertex_name(mapping[i])}"
                )

    if injective:
        seen: dict[int, int] = {}
        for i, j in items:
            if j in seen:
                raise BuggySolution(
                    f"Non-injective mapping: {pattern.vertex_name(i)} -> "
                    f"{target.vertex_name(j)} and {pattern.vertex_name(seen[j])} -> "
                    f"{target.vertex_name(j)}"
                )
            seen[j] = i

    if locally_injective:
        for v in range(pattern.size()):
            seen = {}
            for i, j in items:
                if not pattern.adjacent(v, i):
                    continue
                if j in seen:
                    raise BuggySolution(
                        "Non locally-injective mapping: on neighbourhood of "
                        f"{pattern.vertex_name(v)}, {pattern.vertex_name(i)} -> "
                        f"{target.vertex_name(j)} and {pattern.vertex_name(seen[j])} -> "
                        f"{target.vertex_name(j)}"
                    )
                seen[j] = i

    for i in range(pattern.size()):
        t = mapping[i]
        if pattern.adjacent(i, i) and not target.adjacent(t, t):
            raise BuggySolution(
                f"Vertex {pattern.vertex_name(i)} has a loop but mapped vertex "
                f"{target.vertex_name(t)} does not"
            )
        if induced and target.adjacent(t, t) and not pattern.adjacent(i, i):
            raise BuggySolution(
                f"Vertex {pattern.vertex_name(i)} has no loop but mapped vertex "
                f"{target.vertex_name(t)} does"
            )

    for i, t in items:
        for j, u in items:
            if pattern.adjacent(i, j) and not target.adjacent(t, u):
                raise BuggySolution(
                    f"Edge {pattern.vertex_name(i)} -- {pattern.vertex_name(j)} "
                    f"mapped to non-edge {target.vertex_name(t)} -/- {target.vertex_name(u)}"
                )
            if induced and not pattern.adjacent(i, j) and target.adjacent(t, u):
                raise BuggySolution(
                    f"Non-edge {pattern.vertex_name(i)} -/- {pattern.vertex_name(j)} "
                    f"mapped to edge {target.vertex_name(t)} -- {target.vertex_name(u)}"
                )