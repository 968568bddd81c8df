from __future__ import annotations

import zipfile
import zlib
from collections.abc import Iterable, Iterator
from pathlib import Path

from deprecation_gate import identifiers
from deprecation_gate.classfile import ClassInfo, parse_class
from deprecation_gate.errors import ClassFormatError

ARCHIVE_SUFFIXES = {".jar", ".zip", ".war"}
SKIPPED_CLASS_FILES = {"module-info.class", "package-info.class"}


def find_deprecations(classes: Iterable[ClassInfo]) -> list[str]:
    found: list[str] = []
    for clazz in classes:
        if clazz.deprecated:
            found.append(identifiers.class_identifier(clazz.name))
        for method in clazz.methods:
            if method.deprecated:
                found.append(identifiers.method_identifier(clazz.name, method.name, method.descriptor))
        for fld in clazz.fields:
            if fld.deprecated:
                found.append(identifiers.field_identifier(clazz.name, fld.name))
    return found


def _is_class_entry(name: str) -> bool:
    base = name.rsplit("/", 1)[-1]
    return base.endswith(".class") and base not in SKIPPED_CLASS_FILES


def iter_class_files(path: Path) -> Iterator[tuple[str, bytes]]:
    """Yield ``(source, data)`` for each compiled unit under ``path``.

    ``path`` may be a single ``.class`` file, a directory searched recursively,
    or a jar/zip archive.
    """
    if not path.exists():
        raise FileNotFoundError(f"classes not found: {path}")
    if path.is_dir():
        for child in sorted(path.rglob("*.class")):
            if child.is_file() and _is_class_entry(child.name):
                yield child.as_posix(), child.read_bytes()
        return
    if path.suffix.lower() in ARCHIVE_SUFFIXES:
        try:
            archive = zipfile.ZipFile(path)
        except zipfile.BadZipFile as exc:
            raise ClassFormatError(f"{path}: {exc}") from exc
        with archive:
            for name in sorted(archive.namelist()):
                if not _is_class_entry(name):
                    continue
                source = f"{path.as_posix()}!/{name}"
                try:
                    data = archive.read(name)
                except (zipfile.BadZipFile, zlib.error, NotImplementedError) as exc:
                    raise ClassFormatError(f"{source}: {exc}") from exc
                yield source, data
        return
    yield path.as_posix(), path.read_bytes()


def load_classes(paths: Iterable[Path]) -> list[ClassInfo]:
    classes: list[ClassInfo] = []
    for path in paths:
        for source, data in iter_class_files(Path(path)):
            classes.append(parse_class(data, source=source))
    return classes


def scan(paths: Iterable[Path]) -> list[str]:
    return find_deprecations(load_classes(paths))
