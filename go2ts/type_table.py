"""Fixed Go → TypeScript type tables shared by the mapper and the CLI."""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, Mapping, Tuple


_RESOURCE_PACKAGE = "go2ts._resources"
_RESOURCE_NAME = "go_basic_types.txt"
_SPECIAL_MARKER = "!"


def _read_resource_text() -> str:
    try:
        resource = resources.files(_RESOURCE_PACKAGE).joinpath(_RESOURCE_NAME)
        with resource.open("r", encoding="utf-8") as handle:
            return handle.read()
    except (FileNotFoundError, ModuleNotFoundError):
        fallback = Path(__file__).resolve().parent / "_resources" / _RESOURCE_NAME
        with open(fallback, "r", encoding="utf-8") as handle:
            return handle.read()


@lru_cache(maxsize=1)
def _load_type_entries() -> Tuple[Tuple[Tuple[str, str], ...], Tuple[Tuple[str, str], ...]]:
    text = _read_resource_text()
    special: list[Tuple[str, str]] = []
    basic: list[Tuple[str, str]] = []

    for idx, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        target = basic
        if line.startswith(_SPECIAL_MARKER):
            target = special
            line = line[len(_SPECIAL_MARKER):].strip()
        if "=" not in line:
            raise ValueError(
                f"Invalid entry in {_RESOURCE_NAME} on line {idx}: '{raw_line}'"
            )
        lhs, rhs = line.split("=", 1)
        lhs = lhs.strip()
        rhs = rhs.strip()
        if not lhs or not rhs:
            raise ValueError(
                f"Invalid entry in {_RESOURCE_NAME} on line {idx}: '{raw_line}'"
            )
        target.append((lhs, rhs))

    return tuple(special), tuple(basic)


def get_special_cases() -> Dict[str, str]:
    """Return the literal overrides checked before any structural rule."""

    return dict(_load_type_entries()[0])


def get_basic_type_map(overrides: Mapping[str, str] | None = None) -> Dict[str, str]:
    """Return the basic type table, with ``overrides`` layered on top."""

    mapping = dict(_load_type_entries()[1])
    if overrides:
        for name, ts_type in overrides.items():
            if not isinstance(ts_type, str) or not ts_type.strip():
                raise ValueError(f"Invalid TypeScript type for '{name}': {ts_type!r}")
            mapping[name.strip()] = ts_type.strip()
    return mapping


def iter_integer_key_types() -> Iterable[str]:
    """Return the Go integer types that become ``number`` index keys."""

    # floats, byte and rune take the general key path
    return (
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
    )


def iter_index_key_kinds() -> Iterable[str]:
    """Return the TypeScript types legal as an index signature key."""

    return ("string", "number", "symbol")
