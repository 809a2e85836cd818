"""Proof steps that justify constraints from distance and path graphs."""

from __future__ import annotations

from collections.abc import Sequence

from .proof_core import NamedVertex, ProofBase


class DistanceProofs(ProofBase):
    """Proof logging for adjacency constraints in derived (supplemental) graphs.

    Each method derives, for graph pair ``g``, a constraint saying that if
    ``p`` maps to ``t`` then ``q`` maps to one of a set of target vertices,
    and records its line as the adjacency line for ``(g, p, q, t)``.
    """

    def _adj(self, g: int, a: int, b: int, t: int) -> int:
        return self._adjacency_lines[(g, a, b, t)]

    def _record_adjacency(self, g: int, p: int, q: int, t: int) -> None:
        self._adjacency_lines.setdefault((g, p, q, t), self._proof_line)

    def _implication(self, start: str, p: int, t: int, q: int, targets) -> None:
        terms = "".join(f" 1 x{self._x(q, u)}" for u in targets)
        self._emit(f"{start} 1 ~x{self._x(p, t)}{terms} >= 1 ;\n")
        self._proof_line += 1

    def create_exact_path_graphs(
        self,
        g: int,
        p: NamedVertex,
        q: NamedVertex,
        between_p_and_q: Sequence[NamedVertex],
        t: NamedVertex,
        n_t: Sequence[NamedVertex],
        two_away_from_t: Sequence[tuple[NamedVertex, Sequence[NamedVertex]]],
        d_n_t: Sequence[NamedVertex],
    ) -> None:
        """Justify adjacency in the graph of vertices joined by exactly ``k`` two-paths."""
        self._emit(
            f"* adjacency {p[1]} maps to {t[1]} in G^[{g}x2] so {q[1]} "
            "maps to one of...\n"
        )
        self._emit("# 1\n")

        parts = ["p"]
        first = True
        for b in between_p_and_q:
            parts.append(f" {self._adj(0, p[0], b[0], t[0])}")
            if not first:
                parts.append(" +")
            first = False
        for b in between_p_and_q:
            for w in n_t:
                key = (0, b[0], q[0], w[0])
                if key in self._adjacency_lines:
                    parts.append(f" {self._adjacency_lines[key]} +")
        self._emit("".join(parts) + " 0\n")
        self._proof_line += 1

        self._implication(
            f"j {self._proof_line}", p[0], t[0], q[0],
            [u[0][0] for u in two_away_from_t],
        )

        self._emit(
            f"p {self._proof_line} {self._injectivity_constraints[t[0]]} + 0\n"
        )
        self._proof_line += 1

        self._implication(
            f"j {self._proof_line}", p[0], t[0], q[0],
            [u[0][0] for u in two_away_from_t if u[0] != t],
        )

        things_to_add_up = [self._proof_line]

        for u, via in two_away_from_t:
            if u == t or u in d_n_t:
                continue
            parts = ["p"]
            first = True
            for b in between_p_and_q:
                parts.append(f" {self._adj(0, p[0], b[0], t[0])}")
                if not first:
                    parts.append(" +")
                first = False
                parts.append(f" {self._adj(0, q[0], b[0], u[0])} +")
                parts.append(f" {self._at_most_one_value_constraints[b[0]]} +")
            parts.extend(f" {self._injectivity_constraints[z[0]]} +" for z in via)
            self._emit("".join(parts) + " 0\n")
            self._proof_line += 1

            self._emit(
                f"j {self._proof_line} 1 ~x{self._x(p[0], t[0])} "
                f"1 ~x{self._x(q[0], u[0])} >= 1 ;\n"
            )
            self._proof_line += 1
            things_to_add_up.append(self._proof_line)

        if len(things_to_add_up) > 1:
            head, *rest = things_to_add_up
            summed = f" {head}" + "".join(f" {line} +" for line in rest)
            self._emit(f"p{summed} 0\n")
            self._proof_line += 1

        self._emit("# 0\n")

        self._implication(
            f"j {self._proof_line}", p[0], t[0], q[0],
            [u[0] for u in d_n_t if u != t],
        )
        self._record_adjacency(g, p[0], q[0], t[0])

        self._emit("w 1\n")

    def hack_in_shape_graph(
        self,
        g: int,
        p: NamedVertex,
        q: NamedVertex,
        t: NamedVertex,
        n_t: Sequence[NamedVertex],
    ) -> None:
        """Assert, without derivation, an adjacency constraint from a shape graph."""
        self._emit(
            f"* adjacency {p[1]} maps to {t[1]} in shape graph {g} so {q[1]} "
            "maps to one of...\n"
        )
        self._implication("a", p[0], t[0], q[0], [u[0] for u in n_t])
        self._record_adjacency(g, p[0], q[0], t[0])

    def create_distance3_graphs_but_actually_distance_1(
        self,
        g: int,
        p: NamedVertex,
        q: NamedVertex,
        t: NamedVertex,
        d3_from_t: Sequence[NamedVertex],
    ) -> None:
        """Weaken a direct adjacency constraint into a distance-three one."""
        self._emit(
            f"* adjacency {p[1]} maps to {t[1]} in G^3 so by adjacency, {q[1]} "
            "maps to one of...\n"
        )
        self._implication(
            f"j {self._adj(0, p[0], q[0], t[0])}", p[0], t[0], q[0],
            [u[0] for u in d3_from_t],
        )
        self._record_adjacency(g, p[0], q[0], t[0])

    def create_distance3_graphs_but_actually_distance_2(
        self,
        g: int,
        p: NamedVertex,
        q: NamedVertex,
        path_from_p_to_q: NamedVertex,
        t: NamedVertex,
        d1_from_t: Sequence[NamedVertex],
        d2_from_t: Sequence[NamedVertex],
        d3_from_t: Sequence[NamedVertex],
    ) -> None:
        """Justify a distance-three constraint for vertices two steps apart."""
        self._emit(
            f"* adjacency {p[1]} maps to {t[1]} in G^3 so using vertex "
            f"{path_from_p_to_q[1]}, {q[1]} maps to one of...\n"
        )
        self._emit("# 1\n")

        mid = path_from_p_to_q[0]
        summed = f" {self._adj(0, p[0], mid, t[0])}" + "".join(
            f" {self._adj(0, mid, q[0], u[0])} +" for u in d1_from_t
        )
        self._emit(f"p{summed} 0\n")
        self._proof_line += 1

        self._implication(
            f"j {self._proof_line}", p[0], t[0], q[0], [u[0] for u in d2_from_t]
        )

        self._emit("# 0\n")

        self._implication(
            f"j {self._proof_line}", p[0], t[0], q[0], [u[0] for u in d3_from_t]
        )
        self._record_adjacency(g, p[0], q[0], t[0])

    def create_distance3_graphs(
        self,
        g: int,
        p: NamedVertex,
        q: NamedVertex,
        path_from_p_to_q_1: NamedVertex,
        path_from_p_to_q_2: NamedVertex,
        t: NamedVertex,
        d1_from_t: Sequence[NamedVertex],
        d2_from_t: Sequence[NamedVertex],
        d3_from_t: Sequence[NamedVertex],
    ) -> None:
        """Justify a distance-three constraint along a path of length three."""
        self._emit(
            f"* adjacency {p[1]} maps to {t[1]} in G^3 so using path "
            f"{path_from_p_to_q_1[1]} -- {path_from_p_to_q_2[1]}, {q[1]} "
            "maps to one of...\n"
        )
        self._emit("# 1\n")

        first_hop = path_from_p_to_q_1[0]
        second_hop = path_from_p_to_q_2[0]
        summed = f" {self._adj(0, p[0], first_hop, t[0])}" + "".join(
            f" {self._adj(0, first_hop, second_hop, u[0])} +" for u in d1_from_t
        )
        self._emit(f"p{summed} 0\n")
        self._proof_line += 1

        self._implication(
            f"j {self._proof_line}", p[0], t[0], second_hop,
            [u[0] for u in d2_from_t],
        )

        summed = "".join(
            f" {self._adj(0, second_hop, q[0], u[0])} +" for u in d2_from_t
        )
        self._emit(f"p {self._proof_line}{summed} 0\n")
        self._proof_line += 1

        self._emit("# 0\n")

        self._implication(
            f"j {self._proof_line}", p[0], t[0], q[0], [u[0] for u in d3_from_t]
        )
        self._record_adjacency(g, p[0], q[0], t[0])