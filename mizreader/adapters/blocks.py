"""Balanced-block extraction and scalar field reads over raw mission text.

The mission entry is one large serialized-table literal.  These helpers
work directly on its text without building a tree:

- ``extract_block`` returns the exact ``{ ... }`` span starting at a brace.
- ``find_keyed_block`` / ``iter_indexed_blocks`` locate nested tables.
- ``read_string`` / ``read_int`` / ``read_float`` return the first
  ``["key"] = value`` match in a block as an ``Extracted`` outcome.

Scalar reads are first-match-anywhere: always scope them to the block of
the object being read (via ``find_keyed_block``) so that a same-named key
in a deeper table is never picked up.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from functools import lru_cache

from mizreader.adapters.dictionary import unescape_lua_string
from mizreader.contracts.extraction import Extracted

# Numeric literal as written by the mission serializer (invariant format)
NUMBER_RE = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")

_INDEXED_ENTRY_RE = re.compile(r"\[\s*(\d+)\s*\]\s*=\s*\{")

_DQ_VALUE = r'"((?:[^"\\]|\\.)*)"'
_SQ_VALUE = r"'((?:[^'\\]|\\.)*)'"


def extract_block(text: str, start_index: int) -> str | None:
    """Return the balanced ``{...}`` substring starting at ``start_index``.

    Returns None when ``start_index`` does not point at ``{`` or when the
    text ends before the matching ``}`` (truncated input).
    """
    if start_index < 0 or start_index >= len(text) or text[start_index] != "{":
        return None

    depth = 0
    for i in range(start_index, len(text)):
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start_index : i + 1]
    return None


@lru_cache(maxsize=128)
def _key_pattern(key: str) -> str:
    """Key in bracketed-string form (``["key"]``, ``['key']``) or bare form."""
    k = re.escape(key)
    return rf"""(?:\[\s*["']{k}["']\s*\]|(?<![\w"']){k}(?![\w"']))"""


@lru_cache(maxsize=128)
def _block_re(key: str) -> re.Pattern[str]:
    return re.compile(_key_pattern(key) + r"\s*=\s*\{")


@lru_cache(maxsize=128)
def _string_re(key: str) -> re.Pattern[str]:
    return re.compile(_key_pattern(key) + rf"\s*=\s*(?:{_DQ_VALUE}|{_SQ_VALUE})", re.DOTALL)


@lru_cache(maxsize=128)
def _raw_value_re(key: str) -> re.Pattern[str]:
    return re.compile(_key_pattern(key) + r"\s*=\s*([^,;\s}]+)")


def find_keyed_block(text: str, key: str) -> str | None:
    """Return the table assigned to the first ``["key"] = {`` in ``text``."""
    match = _block_re(key).search(text)
    if match is None:
        return None
    return extract_block(text, match.end() - 1)


def iter_indexed_blocks(array_block: str) -> Iterator[tuple[int, str]]:
    """Yield ``(index, block)`` for each ``[n] = {...}`` entry of an array.

    Scanning resumes after each extracted entry, so numeric keys nested
    inside an entry are never reported as siblings.  Stops at the first
    truncated entry.
    """
    pos = 1 if array_block.startswith("{") else 0
    while True:
        match = _INDEXED_ENTRY_RE.search(array_block, pos)
        if match is None:
            return
        brace = match.end() - 1
        block = extract_block(array_block, brace)
        if block is None:
            return
        yield int(match.group(1)), block
        pos = brace + len(block)


def read_string(block: str, key: str, default: str = "") -> Extracted[str]:
    """First quoted-string value of ``key`` in ``block``."""
    match = _string_re(key).search(block)
    if match is None:
        raw = _raw_value_re(key).search(block)
        if raw is not None and not raw.group(1).startswith("{"):
            return Extracted.malformed(default, raw.group(1))
        return Extracted.defaulted(default)
    value = match.group(1) if match.group(1) is not None else match.group(2)
    return Extracted.found(unescape_lua_string(value), raw=value)


def read_float(block: str, key: str, default: float = 0.0) -> Extracted[float]:
    """First numeric value of ``key`` in ``block`` (decimal or scientific)."""
    match = _raw_value_re(key).search(block)
    if match is None:
        return Extracted.defaulted(default)
    raw = match.group(1)
    if not NUMBER_RE.match(raw) or not math.isfinite(value := float(raw)):
        return Extracted.malformed(default, raw)
    return Extracted.found(value, raw=raw)


def read_int(block: str, key: str, default: int = 0) -> Extracted[int]:
    """First numeric value of ``key`` in ``block``, truncated to an int."""
    result = read_float(block, key, float(default))
    if not result.is_found:
        return Extracted(value=default, status=result.status, raw=result.raw)
    return Extracted.found(int(result.value), raw=result.raw)


@lru_cache(maxsize=16)
def _loose_re(key: str) -> re.Pattern[str]:
    k = re.escape(key)
    return re.compile(rf"""(?<![\w]){k}["']?\s*\]?\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


def read_loose_string(text: str, *keys: str) -> str | None:
    """Case-insensitive quoted value of the first key (in priority order) found.

    Accepts ``["theatre"]="Value"``, ``theatre = 'Value'`` and spacing
    variants.  Used for root identifiers that may appear on any line.
    """
    for key in keys:
        match = _loose_re(key).search(text)
        if match is not None:
            return match.group(1)
    return None


def read_string_list(block: str) -> list[str]:
    """Every quoted value assigned in ``block``, in document order."""
    values = []
    for match in re.finditer(rf"=\s*(?:{_DQ_VALUE}|{_SQ_VALUE})", block, re.DOTALL):
        value = match.group(1) if match.group(1) is not None else match.group(2)
        values.append(unescape_lua_string(value))
    return values
