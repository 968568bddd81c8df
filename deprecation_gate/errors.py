from __future__ import annotations

from collections.abc import Iterable

UNEXPECTED_DEPRECATIONS_MESSAGE = "There were unexpected deprecations"
MISSING_DEPRECATIONS_MESSAGE = (
    "Expected some entities to be deprecated by they were not or have been removed"
)
EXPIRED_DEPRECATIONS_MESSAGE = "It is now time to remove the following deprecated entities"


class DeprecationGateError(RuntimeError):
    """Base error for configuration and input problems."""


class DateFormatError(DeprecationGateError, ValueError):
    """Raised when a declaration date is not YYYY-MM-DD."""


class DuplicateDeprecationError(DeprecationGateError, ValueError):
    """Raised when the same identifier is registered twice."""


class ConfigError(DeprecationGateError):
    pass


class ClassFormatError(DeprecationGateError, ValueError):
    """Raised when a compiled unit cannot be parsed."""


def format_identifiers(identifiers: Iterable[str]) -> str:
    return "".join(f'- "{identifier}"\n' for identifier in identifiers)


class VerificationError(AssertionError):
    header = "Deprecation check failed"

    def __init__(self, identifiers: Iterable[str]) -> None:
        self.identifiers: tuple[str, ...] = tuple(identifiers)
        super().__init__(f"{self.header}:\n{format_identifiers(self.identifiers)}")


class UnexpectedDeprecations(VerificationError):
    header = UNEXPECTED_DEPRECATIONS_MESSAGE


class MissingDeprecations(VerificationError):
    header = MISSING_DEPRECATIONS_MESSAGE


class ExpiredDeprecations(VerificationError):
    header = EXPIRED_DEPRECATIONS_MESSAGE
