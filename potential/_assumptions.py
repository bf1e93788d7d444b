from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Assumption:
    """
    A single modelling assumption a randomization procedure relies on.

    Every result exposes its assumptions via ``result.assumptions``, a list
    of ``Assumption`` objects. Each has a human-readable name and a
    ``testable`` flag indicating whether it can be checked in the data or
    must be justified by the design of the experiment.
    """

    name: str
    """Human-readable description of the assumption."""

    testable: bool
    """``True`` if the assumption can be empirically checked; ``False`` if it rests on the design."""

    def fmt_tag(self) -> str:
        """Return a fixed-width bracketed testability label for use in summary output."""
        return "[  testable  ]" if self.testable else "[ untestable ]"


RANDOMIZATION_ASSUMPTIONS: list[Assumption] = [
    Assumption("Complete random assignment: every split of m treated units is equally likely", testable=False),
    Assumption("Stable Unit Treatment Value Assumption (SUTVA)", testable=False),
    Assumption("Both potential outcomes known for every unit (simulation only)", testable=False),
]

PERMUTATION_ASSUMPTIONS: list[Assumption] = [
    Assumption("Sharp null: treatment has no effect on any unit (y1 = y0)", testable=False),
    Assumption("Complete random assignment: every split of m treated units is equally likely", testable=False),
    Assumption("Stable Unit Treatment Value Assumption (SUTVA)", testable=False),
]
