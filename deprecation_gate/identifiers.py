"""Human readable identifiers for classes, methods and fields.

Grammar::

    class   com.acme.Foo
    method  com.acme.Foo#bar(int, java.lang.String[])
    field   com.acme.Foo#baz

Argument types are rendered from JVM descriptors; the return type is never
part of a method identifier.
"""

from __future__ import annotations

from deprecation_gate.errors import ClassFormatError

PRIMITIVES = {
    "B": "byte",
    "C": "char",
    "D": "double",
    "F": "float",
    "I": "int",
    "J": "long",
    "S": "short",
    "Z": "boolean",
    "V": "void",
}


def class_identifier(internal_name: str) -> str:
    return internal_name.replace("/", ".")


def field_identifier(internal_class_name: str, field_name: str) -> str:
    return f"{class_identifier(internal_class_name)}#{field_name}"


def method_identifier(internal_class_name: str, method_name: str, descriptor: str) -> str:
    args = ", ".join(argument_types(descriptor))
    return f"{class_identifier(internal_class_name)}#{method_name}({args})"


def _read_type(descriptor: str, pos: int) -> tuple[str, int]:
    dimensions = 0
    while pos < len(descriptor) and descriptor[pos] == "[":
        dimensions += 1
        pos += 1
    if pos >= len(descriptor):
        raise ClassFormatError(f"truncated type descriptor: {descriptor!r}")
    code = descriptor[pos]
    if code == "L":
        end = descriptor.find(";", pos)
        if end < 0 or end == pos + 1:
            raise ClassFormatError(f"malformed object type in descriptor: {descriptor!r}")
        name = class_identifier(descriptor[pos + 1 : end])
        pos = end + 1
    elif code in PRIMITIVES:
        name = PRIMITIVES[code]
        pos += 1
    else:
        raise ClassFormatError(f"unknown type code {code!r} in descriptor: {descriptor!r}")
    return name + "[]" * dimensions, pos


def type_name(field_descriptor: str) -> str:
    name, end = _read_type(field_descriptor, 0)
    if end != len(field_descriptor):
        raise ClassFormatError(f"trailing data in type descriptor: {field_descriptor!r}")
    return name


def argument_types(method_descriptor: str) -> list[str]:
    if not method_descriptor.startswith("("):
        raise ClassFormatError(f"method descriptor must start with '(': {method_descriptor!r}")
    close = method_descriptor.find(")")
    if close < 0:
        raise ClassFormatError(f"unterminated method descriptor: {method_descriptor!r}")
    params = method_descriptor[1:close]
    types: list[str] = []
    pos = 0
    while pos < len(params):
        name, pos = _read_type(params, pos)
        types.append(name)
    return types
