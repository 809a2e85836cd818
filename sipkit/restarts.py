"""Schedules that decide when a backtracking search should restart."""

from __future__ import annotations

import math
import threading
import time
from abc import ABC, abstractmethod
from datetime import timedelta


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, with halves going away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return math.ceil(value - 0.5)


class RestartsSchedule(ABC):
    """Interface for a restart policy driven by backtrack notifications."""

    @abstractmethod
    def did_a_backtrack(self) -> None:
        """Record that the search backtracked once."""

    @abstractmethod
    def did_a_restart(self) -> None:
        """Record that the search has just restarted."""

    @abstractmethod
    def should_restart(self) -> bool:
        """Return True if the search should restart now."""

    @abstractmethod
    def might_restart(self) -> bool:
        """Return True if this schedule can ever ask for a restart."""

    @abstractmethod
    def clone(self) -> RestartsSchedule:
        """Return an independent copy of this schedule."""


class NoRestartsSchedule(RestartsSchedule):
    """A schedule that never restarts."""

    def did_a_backtrack(self) -> None:
        pass

    def did_a_restart(self) -> None:
        pass

    def should_restart(self) -> bool:
        return False

    def might_restart(self) -> bool:
        return False

    def clone(self) -> NoRestartsSchedule:
        return NoRestartsSchedule()


class LubyRestartsSchedule(RestartsSchedule):
    """Restarts after a number of backtracks following the Luby sequence."""

    default_multiplier = 666

    def __init__(self, multiplier: int = default_multiplier) -> None:
        self._backtracks_remaining = multiplier
        self._sequence = [multiplier]
        self._position = 0

    def did_a_backtrack(self) -> None:
        self._backtracks_remaining -= 1

    def did_a_restart(self) -> None:
        if self._position == len(self._sequence) - 1:
            self._sequence.extend(list(self._sequence))
            self._sequence.append(self._sequence[-1] * 2)
        self._position += 1
        self._backtracks_remaining = self._sequence[self._position]

    def should_restart(self) -> bool:
        return self._backtracks_remaining <= 0

    def might_restart(self) -> bool:
        return True

    def clone(self) -> LubyRestartsSchedule:
        other = LubyRestartsSchedule(self._sequence[0])
        other._backtracks_remaining = self._backtracks_remaining
        other._sequence = list(self._sequence)
        other._position = self._position
        return other


class GeometricRestartsSchedule(RestartsSchedule):
    """Restarts after a backtrack count that grows geometrically."""

    default_initial_value = 5400.0
    default_multiplier = 1.0

    def __init__(
        self,
        initial_value: float = default_initial_value,
        multiplier: float = default_multiplier,
    ) -> None:
        self._number_of_backtracks = 0
        self._current_value = float(initial_value)
        self._multiplier = float(multiplier)

    def did_a_backtrack(self) -> None:
        self._number_of_backtracks += 1

    def did_a_restart(self) -> None:
        self._number_of_backtracks = 0
        self._current_value *= self._multiplier

    def should_restart(self) -> bool:
        return self._number_of_backtracks >= _round_half_away(self._current_value)

    def might_restart(self) -> bool:
        return True

    def clone(self) -> GeometricRestartsSchedule:
        other = GeometricRestartsSchedule(self._current_value, self._multiplier)
        other._number_of_backtracks = self._number_of_backtracks
        return other


class SyncedRestartSchedule(RestartsSchedule):
    """Restarts whenever a shared event, set by another party, is set."""

    def __init__(self, synchroniser: threading.Event) -> None:
        self._synchroniser = synchroniser

    def did_a_backtrack(self) -> None:
        pass

    def did_a_restart(self) -> None:
        pass

    def should_restart(self) -> bool:
        return self._synchroniser.is_set()

    def might_restart(self) -> bool:
        return True

    def clone(self) -> SyncedRestartSchedule:
        return SyncedRestartSchedule(self._synchroniser)


class TimedRestartsSchedule(RestartsSchedule):
    """Restarts once a time interval has passed and enough backtracks were made.

    The duration is given in seconds, or as a ``timedelta``.
    """

    default_duration = 0.1
    default_minimum_backtracks = 100

    def __init__(
        self,
        duration: float | timedelta = default_duration,
        minimum_backtracks: int = default_minimum_backtracks,
    ) -> None:
        if isinstance(duration, timedelta):
            duration = duration.total_seconds()
        self._duration = float(duration)
        self._minimum_backtracks = minimum_backtracks
        self._number_of_backtracks = 0
        self._next_restart_point = time.monotonic() + self._duration

    def did_a_backtrack(self) -> None:
        self._number_of_backtracks += 1

    def did_a_restart(self) -> None:
        self._next_restart_point = time.monotonic() + self._duration
        self._number_of_backtracks = 0

    def should_restart(self) -> bool:
        return (
            self._number_of_backtracks >= self._minimum_backtracks
            and time.monotonic() >= self._next_restart_point
        )

    def might_restart(self) -> bool:
        return True

    def clone(self) -> TimedRestartsSchedule:
        other = TimedRestartsSchedule(self._duration, self._minimum_backtracks)
        other._number_of_backtracks = self._number_of_backtracks
        other._next_restart_point = self._next_restart_point
        return other