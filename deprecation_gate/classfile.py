"""Minimal JVM class-file reader.

Only what the deprecation scan needs is decoded: the class name, the member
names and descriptors, and whether a runtime-visible ``@Deprecated``
annotation is present. Everything else is skipped by length.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from deprecation_gate.errors import ClassFormatError

MAGIC = 0xCAFEBABE
DEPRECATED_DESCRIPTOR = "Ljava/lang/Deprecated;"
RUNTIME_VISIBLE_ANNOTATIONS = "RuntimeVisibleAnnotations"

CONSTANT_UTF8 = 1
CONSTANT_CLASS = 7
# tag -> payload size in bytes, for entries that are skipped
_FIXED_SIZE_CONSTANTS = {
    3: 4,  # Integer
    4: 4,  # Float
    5: 8,  # Long
    6: 8,  # Double
    8: 2,  # String
    9: 4,  # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}
_WIDE_CONSTANTS = {5, 6}
_CONST_VALUE_TAGS = set("BCDFIJSZs")


@dataclass(frozen=True)
class MemberInfo:
    name: str
    descriptor: str
    deprecated: bool = False


@dataclass(frozen=True)
class ClassInfo:
    name: str
    deprecated: bool = False
    methods: tuple[MemberInfo, ...] = field(default_factory=tuple)
    fields: tuple[MemberInfo, ...] = field(default_factory=tuple)
    source: str | None = None


def decode_modified_utf8(raw: bytes) -> str:
    # NUL is encoded as C0 80 and supplementary characters as surrogate pairs
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
    return text.encode("utf-16", errors="surrogatepass").decode("utf-16")


class _Reader:
    def __init__(self, data: bytes, source: str | None) -> None:
        self.data = data
        self.pos = 0
        self.source = source or "<bytes>"

    def _take(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise ClassFormatError(f"{self.source}: unexpected end of class file at offset {self.pos}")
        chunk = self.data[self.pos : end]
        self.pos = end
        return chunk

    def u1(self) -> int:
        return self._take(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self._take(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self._take(4))[0]

    def skip(self, size: int) -> None:
        self._take(size)

    def read(self, size: int) -> bytes:
        return self._take(size)


class _ConstantPool:
    def __init__(self, reader: _Reader) -> None:
        self.source = reader.source
        self.utf8: dict[int, str] = {}
        self.classes: dict[int, int] = {}
        count = reader.u2()
        index = 1
        while index < count:
            tag = reader.u1()
            if tag == CONSTANT_UTF8:
                length = reader.u2()
                try:
                    self.utf8[index] = decode_modified_utf8(reader.read(length))
                except UnicodeError as exc:
                    raise ClassFormatError(f"{self.source}: bad UTF8 constant #{index}: {exc}") from exc
            elif tag == CONSTANT_CLASS:
                self.classes[index] = reader.u2()
            elif tag in _FIXED_SIZE_CONSTANTS:
                reader.skip(_FIXED_SIZE_CONSTANTS[tag])
            else:
                raise ClassFormatError(f"{self.source}: unknown constant pool tag {tag} at #{index}")
            index += 2 if tag in _WIDE_CONSTANTS else 1

    def text(self, index: int) -> str:
        try:
            return self.utf8[index]
        except KeyError:
            raise ClassFormatError(f"{self.source}: constant #{index} is not a UTF8 entry") from None

    def class_name(self, index: int) -> str:
        try:
            return self.text(self.classes[index])
        except KeyError:
            raise ClassFormatError(f"{self.source}: constant #{index} is not a Class entry") from None


def _skip_element_value(reader: _Reader) -> None:
    tag = chr(reader.u1())
    if tag in _CONST_VALUE_TAGS or tag == "c":
        reader.skip(2)
    elif tag == "e":
        reader.skip(4)
    elif tag == "@":
        _read_annotation(reader)
    elif tag == "[":
        for _ in range(reader.u2()):
            _skip_element_value(reader)
    else:
        raise ClassFormatError(f"{reader.source}: unknown annotation element tag {tag!r}")


def _read_annotation(reader: _Reader) -> int:
    type_index = reader.u2()
    for _ in range(reader.u2()):
        reader.skip(2)
        _skip_element_value(reader)
    return type_index


def _annotation_types(data: bytes, pool: _ConstantPool) -> list[str]:
    reader = _Reader(data, pool.source)
    return [pool.text(_read_annotation(reader)) for _ in range(reader.u2())]


def _has_deprecated_annotation(reader: _Reader, pool: _ConstantPool) -> bool:
    deprecated = False
    for _ in range(reader.u2()):
        name = pool.text(reader.u2())
        payload = reader.read(reader.u4())
        if name == RUNTIME_VISIBLE_ANNOTATIONS:
            if DEPRECATED_DESCRIPTOR in _annotation_types(payload, pool):
                deprecated = True
    return deprecated


def _read_members(reader: _Reader, pool: _ConstantPool) -> tuple[MemberInfo, ...]:
    members: list[MemberInfo] = []
    for _ in range(reader.u2()):
        reader.skip(2)  # access flags
        name = pool.text(reader.u2())
        descriptor = pool.text(reader.u2())
        deprecated = _has_deprecated_annotation(reader, pool)
        members.append(MemberInfo(name=name, descriptor=descriptor, deprecated=deprecated))
    return tuple(members)


def parse_class(data: bytes, source: str | None = None) -> ClassInfo:
    reader = _Reader(data, source)
    if reader.u4() != MAGIC:
        raise ClassFormatError(f"{reader.source}: not a class file (bad magic number)")
    reader.skip(4)  # minor, major version
    pool = _ConstantPool(reader)
    reader.skip(2)  # access flags
    name = pool.class_name(reader.u2())
    reader.skip(2)  # super class
    reader.skip(2 * reader.u2())  # interfaces
    fields = _read_members(reader, pool)
    methods = _read_members(reader, pool)
    deprecated = _has_deprecated_annotation(reader, pool)
    return ClassInfo(
        name=name,
        deprecated=deprecated,
        methods=methods,
        fields=fields,
        source=source,
    )
