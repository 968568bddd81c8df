"""Compare expected deprecations with the ones found in compiled code.

Checks run in a fixed order and ``verify`` stops at the first failing one:

1. unexpected: deprecated in the code but not registered;
2. missing: registered but not deprecated (or removed) in the code;
3. expired: registered and past its removal date.

An unexpected deprecation usually means the registry drifted, and fixing it
often makes "missing" noise disappear too, so it is reported alone.
``compare`` computes all three for callers that want the whole picture.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass

from deprecation_gate import dates, scanner
from deprecation_gate.classfile import ClassInfo
from deprecation_gate.errors import (
    ExpiredDeprecations,
    MissingDeprecations,
    UnexpectedDeprecations,
)
from deprecation_gate.registry import DeprecationRegistry


@dataclass(frozen=True)
class VerificationResult:
    unexpected: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()
    expired: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not (self.unexpected or self.missing or self.expired)

    def raise_for_failures(self) -> None:
        if self.unexpected:
            raise UnexpectedDeprecations(self.unexpected)
        if self.missing:
            raise MissingDeprecations(self.missing)
        if self.expired:
            raise ExpiredDeprecations(self.expired)


def compare(
    expected: DeprecationRegistry,
    actual: Iterable[str],
    now: dt.date | str | None = None,
) -> VerificationResult:
    reference = dates.coerce_date(now)
    actual_ids = list(dict.fromkeys(actual))
    actual_set = set(actual_ids)
    expected_ids = expected.identifiers()
    expected_set = set(expected_ids)

    return VerificationResult(
        unexpected=tuple(i for i in actual_ids if i not in expected_set),
        missing=tuple(i for i in expected_ids if i not in actual_set),
        expired=tuple(d.identifier for d in expected if d.is_expired(reference)),
    )


def verify(
    expected: DeprecationRegistry,
    actual: Iterable[str],
    now: dt.date | str | None = None,
) -> None:
    compare(expected, actual, now).raise_for_failures()


def verify_classes(
    expected: DeprecationRegistry,
    classes: Iterable[ClassInfo],
    now: dt.date | str | None = None,
) -> None:
    verify(expected, scanner.find_deprecations(classes), now)
