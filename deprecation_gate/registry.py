from __future__ import annotations

import datetime as dt
from collections.abc import Iterator
from dataclasses import dataclass

from deprecation_gate import dates
from deprecation_gate.errors import DuplicateDeprecationError

DEFAULT_TRANSITION_PERIOD_DAYS = 1


@dataclass(frozen=True)
class Deprecation:
    identifier: str
    declared: dt.date
    removal_date: dt.date

    def is_expired(self, now: dt.date) -> bool:
        return now > self.removal_date

    def __str__(self) -> str:
        return self.identifier


def removal_date_for(declared: dt.date, transition_period_days: int) -> dt.date:
    # one extra day so that a same-day declaration survives the next day's build
    return dates.plus_days(declared, transition_period_days + 1)


class DeprecationRegistry:
    """Expected deprecations, in declaration order.

    Usage::

        expected = (
            DeprecationRegistry()
            .add("com.acme.Foo", "2020-01-01", 30)
            .add("com.acme.Foo#bar(int, java.lang.String)")
        )
    """

    def __init__(self) -> None:
        self._entries: dict[str, Deprecation] = {}

    def add(
        self,
        identifier: str,
        declared: dt.date | str | None = None,
        transition_period_days: int = DEFAULT_TRANSITION_PERIOD_DAYS,
    ) -> DeprecationRegistry:
        if not isinstance(identifier, str) or not identifier.strip():
            raise ValueError("deprecation identifier must be a non-empty string")
        if identifier != identifier.strip():
            raise ValueError(f"deprecation identifier has surrounding whitespace: {identifier!r}")
        if isinstance(transition_period_days, bool) or not isinstance(transition_period_days, int):
            raise ValueError(
                f"{identifier}: transition period must be an integer number of days"
            )
        if transition_period_days < 0:
            raise ValueError(f"{identifier}: transition period must not be negative")
        if identifier in self._entries:
            raise DuplicateDeprecationError(f"deprecation already registered: {identifier}")

        declared_date = dates.coerce_date(declared)
        self._entries[identifier] = Deprecation(
            identifier=identifier,
            declared=declared_date,
            removal_date=removal_date_for(declared_date, transition_period_days),
        )
        return self

    register = add

    def identifiers(self) -> list[str]:
        return list(self._entries)

    def get(self, identifier: str) -> Deprecation | None:
        return self._entries.get(identifier)

    def __iter__(self) -> Iterator[Deprecation]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __repr__(self) -> str:
        return f"DeprecationRegistry({self.identifiers()!r})"
