from __future__ import annotations

from deprecation_gate.errors import (
    ClassFormatError,
    ConfigError,
    DateFormatError,
    DeprecationGateError,
    DuplicateDeprecationError,
    ExpiredDeprecations,
    MissingDeprecations,
    UnexpectedDeprecations,
    VerificationError,
)
from deprecation_gate.registry import Deprecation, DeprecationRegistry
from deprecation_gate.verifier import VerificationResult, compare, verify, verify_classes

__all__ = [
    "ClassFormatError",
    "ConfigError",
    "DateFormatError",
    "Deprecation",
    "DeprecationGateError",
    "DeprecationRegistry",
    "DuplicateDeprecationError",
    "ExpiredDeprecations",
    "MissingDeprecations",
    "UnexpectedDeprecations",
    "VerificationError",
    "VerificationResult",
    "compare",
    "verify",
    "verify_classes",
]
