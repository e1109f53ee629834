"""Tokenizer and recursive-descent reader for serialized-table text.

Only the subset the mission serializer emits is supported: tables,
bracketed string and integer keys, bare identifier keys, positional
values, double/single-quoted strings, numbers, booleans and ``nil``, plus
``--`` line comments.  There is no expression evaluation.

The reader produces ``LuaTable`` trees whose typed accessors return
``Extracted`` outcomes, so every lookup is scoped to the table it is made
on rather than to the whole text.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from typing import Any, NamedTuple

from mizreader.adapters.dictionary import unescape_lua_string
from mizreader.contracts.extraction import Extracted
from mizreader.errors import TableSyntaxError

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<comment>--[^\n]*)
    | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    | (?P<number>[-+]?(?:0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?))
    | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<punct>[{}\[\]=,;])
    """,
    re.VERBOSE | re.DOTALL,
)

_CONSTANTS = {"true": True, "false": False, "nil": None}


class Token(NamedTuple):
    kind: str  # "string" | "number" | "name" | "punct"
    value: Any
    offset: int


def _number(text: str) -> int | float:
    body = text.lstrip("+-")
    if body[:2].lower() == "0x":
        value = int(body, 16)
        return -value if text.startswith("-") else value
    if "." in text or "e" in text or "E" in text:
        return float(text)
    return int(text)


def tokenize(text: str, start: int = 0) -> Iterator[Token]:
    """Yield tokens from ``text[start:]``, skipping whitespace and comments."""
    pos = start
    end = len(text)
    while pos < end:
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise TableSyntaxError(f"unexpected character {text[pos]!r}", pos)
        kind = match.lastgroup
        raw = match.group()
        if kind == "string":
            yield Token("string", unescape_lua_string(raw[1:-1]), pos)
        elif kind == "number":
            yield Token("number", _number(raw), pos)
        elif kind in ("name", "punct"):
            yield Token(kind, raw, pos)
        pos = match.end()


class LuaTable(dict):
    """A parsed table: string and integer keys to scalars or nested tables."""

    def table(self, key: str | int) -> LuaTable:
        """Nested table under ``key``; an empty table when absent or scalar."""
        value = self.get(key)
        return value if isinstance(value, LuaTable) else LuaTable()

    def string(self, key: str | int, default: str = "") -> Extracted[str]:
        if key not in self:
            return Extracted.defaulted(default)
        value = self[key]
        if isinstance(value, str):
            return Extracted.found(value)
        return Extracted.malformed(default, repr(value))

    def number(self, key: str | int, default: float = 0.0) -> Extracted[float]:
        if key not in self:
            return Extracted.defaulted(default)
        value = raw = self[key]
        if isinstance(raw, str):
            try:
                value = _number(raw.strip())
            except ValueError:
                return Extracted.malformed(default, repr(raw))
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                number = float(value)
            except OverflowError:
                number = math.inf
            # overflowing literals such as 1e999 read as inf
            if math.isfinite(number):
                return Extracted.found(number, raw=raw if isinstance(raw, str) else None)
        return Extracted.malformed(default, repr(raw))

    def integer(self, key: str | int, default: int = 0) -> Extracted[int]:
        result = self.number(key, float(default))
        if not result.is_found:
            return Extracted(value=default, status=result.status, raw=result.raw)
        return Extracted.found(int(result.value), raw=result.raw)

    def array(self) -> list[LuaTable]:
        """Table values under integer keys, ordered by index."""
        return [
            self[k]
            for k in sorted(k for k in self if isinstance(k, int))
            if isinstance(self[k], LuaTable)
        ]


class _TokenStream:
    """Token iterator with one token of lookahead."""

    def __init__(self, tokens: Iterator[Token], end_offset: int):
        self._tokens = tokens
        self._peeked: Token | None = None
        self._end_offset = end_offset

    def peek(self) -> Token | None:
        if self._peeked is None:
            self._peeked = next(self._tokens, None)
        return self._peeked

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise TableSyntaxError("unexpected end of table text", self._end_offset)
        self._peeked = None
        return token

    def expect(self, punct: str) -> Token:
        token = self.next()
        if token.kind != "punct" or token.value != punct:
            raise TableSyntaxError(f"expected {punct!r}, got {token.value!r}", token.offset)
        return token

    def at(self, punct: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == "punct" and token.value == punct


def _read_value(stream: _TokenStream) -> Any:
    token = stream.next()
    if token.kind in ("string", "number"):
        return token.value
    if token.kind == "name" and token.value in _CONSTANTS:
        return _CONSTANTS[token.value]
    if token.kind == "punct" and token.value == "{":
        return _read_table_body(stream)
    raise TableSyntaxError(f"unexpected value {token.value!r}", token.offset)


def _read_table_body(stream: _TokenStream) -> LuaTable:
    """Read fields up to and including the closing brace."""
    table = LuaTable()
    next_index = 1
    while not stream.at("}"):
        token = stream.peek()
        if token is None:
            stream.next()  # raises: truncated table
        if token.kind == "punct" and token.value == "[":
            stream.next()
            key = _read_value(stream)
            if isinstance(key, LuaTable):
                raise TableSyntaxError("table used as key", token.offset)
            stream.expect("]")
            stream.expect("=")
            table[key] = _read_value(stream)
        elif token.kind == "name" and token.value not in _CONSTANTS:
            stream.next()
            stream.expect("=")
            table[token.value] = _read_value(stream)
        else:
            table[next_index] = _read_value(stream)
            next_index += 1
        if stream.at(",") or stream.at(";"):
            stream.next()
        elif not stream.at("}"):
            bad = stream.next()
            raise TableSyntaxError(f"expected ',' or '}}', got {bad.value!r}", bad.offset)
    stream.expect("}")
    return table


def parse_table(text: str) -> LuaTable:
    """Parse a single table literal such as a balanced block."""
    stream = _TokenStream(tokenize(text), len(text))
    stream.expect("{")
    table = _read_table_body(stream)
    trailing = stream.peek()
    if trailing is not None:
        raise TableSyntaxError(f"unexpected {trailing.value!r} after table", trailing.offset)
    return table

def find_top_level_values(text: str, *keys: str) -> dict[str, Any]:
    """Values of ``keys`` at nesting depth 1 of ``text``, without a full parse.

    Depth counts table braces from the start of the text, so for
    ``mission = { ["date"] = {...}, ... }`` the mission's own keys sit at
    depth 1, and for a ``{ ... }`` block its direct fields do.  Scanning
    stops once every key is found.  Keys that are absent at that depth, or
    that lie beyond a point where the text cannot be tokenized, are
    missing from the result.
    """
    wanted = set(keys)
    found: dict[str, Any] = {}
    stream = _TokenStream(tokenize(text), len(text))
    depth = 0
    try:
        while wanted and (token := stream.peek()) is not None:
            stream.next()
            if token.kind != "punct":
                continue
            if token.value == "{":
                depth += 1
            elif token.value == "}":
                depth -= 1
            elif token.value == "[" and depth == 1:
                candidate = stream.next()
                if candidate.kind == "string" and candidate.value in wanted and stream.at("]"):
                    stream.next()
                    stream.expect("=")
                    found[candidate.value] = _read_value(stream)
                    wanted.discard(candidate.value)
    except TableSyntaxError:
        pass
    return found


def find_top_level_value(text: str, key: str) -> Any | None:
    return find_top_level_values(text, key).get(key)
