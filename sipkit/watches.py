"""A two-watched-literals store for nogoods learned during search."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

D = TypeVar("D", bound=Hashable)


@dataclass
class Nogood(Generic[D]):
    """A set of decisions that cannot all hold together.

    When there are at least two literals, the first two are the watched ones;
    the literals are reordered as the watches move.
    """

    literals: list[D] = field(default_factory=list)


def _new_table() -> defaultdict:
    return defaultdict(list)


@dataclass
class Watches(Generic[D]):
    """Nogoods, and for each decision the nogoods currently watching it.

    Newly posted nogoods only take effect once :meth:`apply_new_nogoods` is
    called, which is done on restarts so that nogoods can be shared between
    searches.
    """

    nogoods: list[Nogood[D]] = field(default_factory=list)
    table: defaultdict[D, list[Nogood[D]]] = field(default_factory=_new_table)
    need_to_watch: list[Nogood[D]] = field(default_factory=list)
    gathered_need_to_watch: list[Nogood[D]] = field(default_factory=list)

    def propagate(
        self,
        current_assignment: D,
        can_watch: Callable[[D], bool],
        assignment_is_nogood: Callable[[D], object],
    ) -> None:
        """Handle ``current_assignment`` being made.

        Each nogood watching it either moves its watch to another literal for
        which ``can_watch`` holds, or, if there is none, forces its other
        watched literal to be ruled out through ``assignment_is_nogood``.
        """
        watching = self.table[current_assignment]
        to_update = list(watching)
        watching.clear()

        for nogood in to_update:
            literals = nogood.literals
            if literals[0] != current_assignment:
                literals[0], literals[1] = literals[1], literals[0]

            for position, literal in enumerate(literals[2:], start=2):
                if can_watch(literal):
                    literals[0], literals[position] = literal, literals[0]
                    self.table[literals[0]].append(nogood)
                    break
            else:
                assignment_is_nogood(literals[1])
                watching.append(nogood)

    def post_nogood(self, nogood: Nogood[D]) -> None:
        """Store a nogood; it is watched once new nogoods are applied."""
        self.nogoods.append(nogood)
        self.need_to_watch.append(nogood)

    def apply_new_nogoods(self, assignment_is_nogood: Callable[[D], object]) -> bool:
        """Start watching every pending nogood.

        Returns True as soon as an empty nogood is met, meaning the problem
        has no solution left.
        """
        for nogood in (*self.need_to_watch, *self.gathered_need_to_watch):
            if self.apply_one_new_nogood(nogood, assignment_is_nogood):
                return True
        return False

    def apply_one_new_nogood(
        self, nogood: Nogood[D], assignment_is_nogood: Callable[[D], object]
    ) -> bool:
        """Start watching one nogood; return True if it is empty.

        A nogood with a single literal rules that literal out at once.
        """
        literals = nogood.literals
        if not literals:
            return True
        if len(literals) == 1:
            assignment_is_nogood(literals[0])
        else:
            self.table[literals[0]].append(nogood)
            self.table[literals[1]].append(nogood)
        return False

    def gather_nogoods_from(self, other: Watches[D]) -> None:
        """Copy the nogoods that ``other`` has posted but not yet applied."""
        for nogood in other.need_to_watch:
            copied = Nogood(list(nogood.literals))
            self.nogoods.append(copied)
            self.gathered_need_to_watch.append(copied)

    def clear_new_nogoods(self) -> None:
        """Forget which nogoods are pending; they stay in the store."""
        self.need_to_watch.clear()
        self.gathered_need_to_watch.clear()