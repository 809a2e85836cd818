"""Pseudo-Boolean model and proof-log writing for subgraph search.

A :class:`ProofBase` collects the constraints of an OPB model, writes the
model out with :meth:`ProofBase.finalise_model`, and then appends proof
steps to a log that a pseudo-Boolean proof checker can verify.

Vertices that appear in log comments are passed as ``(index, name)`` pairs.
"""

from __future__ import annotations

import bz2 as _bz2
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import TextIO

NamedVertex = tuple[int, str]


class ProofError(Exception):
    """Raised when the model or the proof log cannot be written."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Proof error: {message}")


def _polish(leading: Iterable[object], added: Iterable[object]) -> str:
    """Sum constraint lines: the first of ``leading`` is bare, all others add."""
    parts: list[str] = []
    first = True
    for line in leading:
        parts.append(f" {line}" if first else f" {line} +")
        first = False
    parts.extend(f" {line} +" for line in added)
    return "".join(parts)


class ProofBase:
    """Writes an OPB model of a subgraph problem and a proof log about it."""

    def __init__(
        self,
        opb_file: str,
        log_file: str,
        friendly_names: bool,
        bz2: bool,
        super_extra_verbose: bool = False,
    ) -> None:
        self._opb_filename = opb_file
        self._log_filename = log_file
        self._friendly_names = friendly_names
        self._bz2 = bz2
        self._super_extra_verbose = super_extra_verbose

        self._model: list[str] = []
        self._model_prelude: list[str] = []
        self._proof_stream: TextIO | None = None

        self._variable_mappings: defaultdict[tuple[int, int], str] = defaultdict(str)
        self._binary_variable_mappings: defaultdict[int, str] = defaultdict(str)
        self._connected_variable_mappings: defaultdict[tuple[int, int, int], str] = (
            defaultdict(str)
        )
        self._connected_variable_mappings_aux: dict[tuple[int, int, int, int], str] = {}
        self._at_least_one_value_constraints: defaultdict[int, int] = defaultdict(int)
        self._at_most_one_value_constraints: defaultdict[int, int] = defaultdict(int)
        self._injectivity_constraints: defaultdict[int, int] = defaultdict(int)
        self._adjacency_lines: defaultdict[tuple[int, int, int, int], int] = (
            defaultdict(int)
        )
        self._eliminations: defaultdict[tuple[int, int], int] = defaultdict(int)
        self._non_edge_constraints: defaultdict[tuple[int, int], int] = defaultdict(int)
        self._objective_line = 0

        self._nb_constraints = 0
        self._proof_line = 0
        self._largest_level_set = 0

        self._clique_encoding = False

        self._doing_hom_colour_proof = False
        self._hom_colour_proof_p: NamedVertex = (0, "")
        self._hom_colour_proof_t: NamedVertex = (0, "")
        self._p_clique: list[NamedVertex] = []
        self._t_clique_neighbourhood: dict[int, NamedVertex] = {}
        self._clique_for_hom_non_edge_constraints: dict[
            tuple[tuple[NamedVertex, NamedVertex], tuple[NamedVertex, NamedVertex]], int
        ] = {}

        self._zero_in_proof_objectives: list[tuple[int, int]] = []

    # -- plumbing ---------------------------------------------------------

    def _open(self, filename: str) -> TextIO:
        if self._bz2:
            return _bz2.open(filename + ".bz2", "wt")
        return open(filename, "w")

    def _emit(self, text: str) -> None:
        if self._proof_stream is None:
            raise ProofError("the proof log is not open")
        self._proof_stream.write(text)

    def _x(self, p: int, t: int) -> str:
        return self._variable_mappings[(p, t)]

    def super_extra_verbose(self) -> bool:
        """Return whether very detailed comments were asked for."""
        return self._super_extra_verbose

    # -- model writing ----------------------------------------------------

    def create_cp_variable(
        self,
        pattern_vertex: int,
        target_size: int,
        pattern_name: Callable[[int], str],
        target_name: Callable[[int], str],
    ) -> None:
        """Create the 0/1 variables saying where ``pattern_vertex`` maps to."""
        for i in range(target_size):
            key = (pattern_vertex, i)
            if key in self._variable_mappings:
                continue
            if self._friendly_names:
                name = f"{pattern_name(pattern_vertex)}_{target_name(i)}"
            else:
                name = str(len(self._variable_mappings) + 1)
            self._variable_mappings[key] = name

        xs = [self._x(pattern_vertex, i) for i in range(target_size)]
        self._model.append(f"* vertex {pattern_vertex} domain\n")
        self._model.append("".join(f"1 x{x} " for x in xs) + ">= 1 ;\n")
        self._nb_constraints += 1
        self._at_least_one_value_constraints.setdefault(
            pattern_vertex, self._nb_constraints
        )

        self._model.append("".join(f"-1 x{x} " for x in xs) + ">= -1 ;\n")
        self._nb_constraints += 1
        self._at_most_one_value_constraints.setdefault(
            pattern_vertex, self._nb_constraints
        )

    def create_injectivity_constraints(self, pattern_size: int, target_size: int) -> None:
        """Forbid two pattern vertices from sharing a target vertex."""
        for v in range(target_size):
            self._model.append(f"* injectivity on value {v}\n")
            terms = []
            for p in range(pattern_size):
                x = self._variable_mappings.get((p, v))
                if x is not None:
                    terms.append(f"-1 x{x} ")
            self._model.append("".join(terms) + ">= -1 ;\n")
            self._nb_constraints += 1
            self._injectivity_constraints.setdefault(v, self._nb_constraints)

    def create_forbidden_assignment_constraint(self, p: int, t: int) -> None:
        """Forbid mapping ``p`` to ``t`` in the model."""
        self._model.append("* forbidden assignment\n")
        self._model.append(f"1 ~x{self._x(p, t)} >= 1 ;\n")
        self._nb_constraints += 1
        self._eliminations.setdefault((p, t), self._nb_constraints)

    def start_adjacency_constraints_for(self, p: int, t: int) -> None:
        """Write a comment opening the adjacency constraints for ``p -> t``."""
        self._model.append(f"* adjacency {p} maps to {t}\n")

    def create_adjacency_constraint(
        self, p: int, q: int, t: int, uu: Sequence[int], induced: bool
    ) -> None:
        """If ``p`` maps to ``t`` then ``q`` maps to one of ``uu``."""
        line = f"1 ~x{self._x(p, t)}"
        line += "".join(f" 1 x{self._x(q, u)}" for u in uu)
        self._model.append(line + " >= 1 ;\n")
        self._nb_constraints += 1
        self._adjacency_lines.setdefault((0, p, q, t), self._nb_constraints)

    def finalise_model(self) -> None:
        """Write the OPB model file and start the proof log."""
        n_variables = (
            len(self._variable_mappings)
            + len(self._binary_variable_mappings)
            + len(self._connected_variable_mappings)
            + len(self._connected_variable_mappings_aux)
        )
        try:
            with self._open(self._opb_filename) as f:
                f.write(
                    f"* #variable= {n_variables} #constraint= {self._nb_constraints}\n"
                )
                f.write("".join(self._model_prelude))
                f.write("".join(self._model))
        except OSError as exc:
            raise ProofError(
                f"Error writing opb file to '{self._opb_filename}'"
            ) from exc
        self._model_prelude.clear()
        self._model.clear()

        try:
            self._proof_stream = self._open(self._log_filename)
            self._proof_stream.write("pseudo-Boolean proof version 1.0\n")
            self._proof_stream.write(f"f {self._nb_constraints} 0\n")
        except OSError as exc:
            raise ProofError(
                f"Error writing proof file to '{self._log_filename}'"
            ) from exc
        self._proof_line += self._nb_constraints

    def close(self) -> None:
        """Flush and close the proof log."""
        if self._proof_stream is not None:
            try:
                self._proof_stream.close()
            finally:
                self._proof_stream = None

    # -- conclusions and top-level failures -------------------------------

    def finish_unsat_proof(self) -> None:
        """Assert the contradiction and conclude that the problem is unsatisfiable."""
        self._emit("* asserting that we've proved unsat\n")
        self._emit("u >= 1 ;\n")
        self._proof_line += 1
        self._emit(f"c {self._proof_line} 0\n")

    def failure_due_to_pattern_bigger_than_target(self) -> None:
        """Derive a contradiction from a pattern with more vertices than the target."""
        self._emit("* failure due to the pattern being bigger than the target\n")
        leading = [line for _, line in sorted(self._at_least_one_value_constraints.items())]
        added = [line for _, line in sorted(self._injectivity_constraints.items())]
        self._emit("p" + _polish(leading, added) + " 0\n")
        self._proof_line += 1

    # -- domain initialisation --------------------------------------------

    def incompatible_by_degrees(
        self,
        g: int,
        p: NamedVertex,
        n_p: Sequence[int],
        t: NamedVertex,
        n_t: Sequence[int],
    ) -> None:
        """Eliminate ``p -> t`` because ``p`` has more neighbours than ``t``."""
        self._emit(
            f"* cannot map {p[1]} to {t[1]} due to degrees in graph pairs {g}\n"
        )
        leading = [
            self._adjacency_lines[(g, p[0], n, t[0])]
            for n in n_p
            if (g, p[0], n, t[0]) in self._adjacency_lines
        ]
        added = [self._injectivity_constraints[n] for n in n_t]
        self._emit("p" + _polish(leading, added) + " 0\n")
        self._proof_line += 1

        self._emit(f"j {self._proof_line} 1 ~x{self._x(p[0], t[0])} >= 1 ;\n")
        self._proof_line += 1
        self._eliminations.setdefault((p[0], t[0]), self._proof_line)

        self._emit(f"d {self._proof_line - 1} 0\n")

    def incompatible_by_nds(
        self,
        g: int,
        p: NamedVertex,
        t: NamedVertex,
        p_subsequence: Sequence[int],
        t_subsequence: Sequence[int],
        t_remaining: Sequence[int],
    ) -> None:
        """Eliminate ``p -> t`` by neighbourhood degree sequences."""
        self._emit(f"* cannot map {p[1]} to {t[1]} due to nds in graph pairs {g}\n")

        leading = [
            self._adjacency_lines[(g, p[0], n, t[0])]
            for n in p_subsequence
            if (g, p[0], n, t[0]) in self._adjacency_lines
        ]
        last = t_subsequence[-1]
        added = [self._injectivity_constraints[u] for u in t_subsequence if u != last]
        added += [
            self._eliminations[(n, u)] for n in p_subsequence for u in t_remaining
        ]
        added += [self._eliminations[(n, last)] for n in p_subsequence]
        self._emit("p" + _polish(leading, added) + " 0\n")
        self._proof_line += 1

        self._emit(f"j {self._proof_line} 1 ~x{self._x(p[0], t[0])} >= 1 ;\n")
        self._proof_line += 1

        self._emit(f"d {self._proof_line - 1} 0\n")

    def initial_domain_is_empty(self, p: int) -> None:
        """Note that the domain of ``p`` was empty from the start."""
        self._emit(f"* failure due to domain {p} being empty\n")

    def emit_hall_set_or_violator(
        self, lhs: Sequence[NamedVertex], rhs: Sequence[NamedVertex]
    ) -> None:
        """Sum the constraints behind a Hall set or Hall violator."""
        names_l = "".join(f" {v[1]}" for v in lhs)
        names_r = "".join(f" {v[1]}" for v in rhs)
        self._emit(f"* hall set or violator {{{names_l} }} / {{{names_r} }}\n")
        leading = [self._at_least_one_value_constraints[v[0]] for v in lhs]
        added = [self._injectivity_constraints[v[0]] for v in rhs]
        self._emit("p" + _polish(leading, added) + " 0\n")
        self._proof_line += 1

    # -- branching --------------------------------------------------------

    def root_propagation_failed(self) -> None:
        """Note that propagation failed at the root of the search."""
        self._emit("* root node propagation failed\n")

    def guessing(self, depth: int, branch_v: NamedVertex, val: NamedVertex) -> None:
        """Note a branching decision."""
        self._emit(f"* [{depth}] guessing {branch_v[1]}={val[1]}\n")

    def _nogood(self, prefix: str, decisions: Iterable[tuple[int, int]]) -> None:
        terms = "".join(f" 1 ~x{self._x(var, val)}" for var, val in decisions)
        self._emit(f"{prefix}{terms} >= 1 ;\n")
        self._proof_line += 1

    def propagation_failure(
        self,
        decisions: Sequence[tuple[int, int]],
        branch_v: NamedVertex,
        val: NamedVertex,
    ) -> None:
        """Record that the current decisions cannot be extended."""
        self._emit(
            f"* [{len(decisions)}] propagation failure on {branch_v[1]}={val[1]}\n"
        )
        self._nogood("u ", decisions)

    def incorrect_guess(
        self, decisions: Sequence[tuple[int, int]], was_failure: bool
    ) -> None:
        """Record that a guess led nowhere, and rule the decisions out."""
        if was_failure:
            self._emit(f"* [{len(decisions)}] incorrect guess\n")
        else:
            self._emit(f"* [{len(decisions)}] backtracking\n")
        self._nogood("u", decisions)

    def out_of_guesses(self, decisions: Sequence[tuple[int, int]]) -> None:
        """Nothing needs writing when a node runs out of values."""

    def unit_propagating(self, var: NamedVertex, val: NamedVertex) -> None:
        """Note a forced assignment."""
        self._emit(f"* unit propagating {var[1]}={val[1]}\n")

    # -- levels -----------------------------------------------------------

    def start_level(self, level: int) -> None:
        """Move to proof level ``level``."""
        self._emit(f"# {level}\n")
        self._largest_level_set = max(self._largest_level_set, level)

    def back_up_to_level(self, level: int) -> None:
        """Return to proof level ``level``."""
        self._emit(f"# {level}\n")
        self._largest_level_set = max(self._largest_level_set, level)

    def forget_level(self, level: int) -> None:
        """Wipe constraints at ``level`` and above, if that level was ever used."""
        if self._largest_level_set >= level:
            self._emit(f"w {level}\n")

    def back_up_to_top(self) -> None:
        """Return to proof level zero."""
        self._emit("# 0\n")

    def post_restart_nogood(self, decisions: Sequence[tuple[int, int]]) -> None:
        """Record the nogood learned before a restart."""
        self._emit(f"* [{len(decisions)}] restart nogood\n")
        self._nogood("u", decisions)

    # -- solutions and incumbents -----------------------------------------

    def post_solution(
        self, decisions: Sequence[tuple[NamedVertex, NamedVertex]]
    ) -> None:
        """Log a solution given as pattern/target vertex pairs."""
        names = "".join(f" {var[1]}={val[1]}" for var, val in decisions)
        self._emit(f"* found solution{names}\n")
        xs = "".join(f" x{self._x(var[0], val[0])}" for var, val in decisions)
        self._emit(f"v{xs}\n")
        self._proof_line += 1

    def post_binary_solution(self, solution: Sequence[int]) -> None:
        """Log a solution given as the set binary variables."""
        xs = "".join(f" x{self._binary_variable_mappings[v]}" for v in solution)
        self._emit(f"v{xs}\n")
        self._proof_line += 1

    def new_incumbent(
        self, decisions: Sequence[tuple[NamedVertex, NamedVertex, bool]]
    ) -> None:
        """Log an improving solution given as assignment literals."""
        lits = "".join(
            f" {'' if value else '~'}x{self._x(var[0], val[0])}"
            for var, val, value in decisions
        )
        self._emit(f"o{lits}\n")
        self._proof_line += 1
        self._objective_line = self._proof_line

    def new_binary_incumbent(self, solution: Sequence[tuple[int, bool]]) -> None:
        """Log an improving solution given as binary variable literals."""
        lits = "".join(
            f" {'' if value else '~'}x{self._binary_variable_mappings[v]}"
            for v, value in solution
        )
        lits += "".join(
            f" ~x{self._x(v, w)}" for v, w in self._zero_in_proof_objectives
        )
        self._emit(f"o{lits}\n")
        self._proof_line += 1
        self._objective_line = self._proof_line

    # -- commentary -------------------------------------------------------

    def show_domains(
        self,
        where: str,
        domains: Sequence[tuple[NamedVertex, Sequence[NamedVertex]]],
    ) -> None:
        """Write the current domains as comments."""
        self._emit(f"* {where}, domains follow\n")
        for p, ts in domains:
            values = "".join(f" {t[1]}" for t in ts)
            self._emit(f"*    {p[1]} size {len(ts)} = {{{values} }}\n")

    def propagated(
        self, p: NamedVertex, t: NamedVertex, g: int, n_values: int, q: NamedVertex
    ) -> None:
        """Note how many values an adjacency propagation removed."""
        self._emit(
            f"* adjacency propagation from {p[1]} -> {t[1]} in graph pairs {g} "
            f"deleted {n_values} values from {q[1]}\n"
        )