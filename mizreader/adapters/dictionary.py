"""Localization dictionary resolution.

Mission text fields often hold an indirection key (``DictKey_...``) whose
display text lives in the ``l10n/DEFAULT/dictionary`` entry::

    dictionary =
    {
        ["DictKey_descriptionText_1"] = "First line\\
    Second line with \\"quotes\\"",
    } -- end of dictionary
"""

from __future__ import annotations

import re

DICT_KEY_PREFIX = "DictKey_"

_CONTINUATION_RE = re.compile(r"\\(?=[\r\n])")


def unescape_lua_string(text: str) -> str:
    """Undo the serializer's string escapes.

    Order matters: the backslash of a line continuation is dropped first
    (the line break itself stays), then ``\\n`` and ``\\"``, and literal
    backslashes last so nothing is unescaped twice.
    """
    if not text or "\\" not in text:
        return text
    result = _CONTINUATION_RE.sub("", text)
    result = result.replace("\\n", "\n").replace('\\"', '"').replace("\\\\", "\\")
    return result


def escape_lua_string(text: str) -> str:
    """Escape text for a double-quoted value, breaking lines the serializer's way."""
    result = text.replace("\r\n", "\n").replace("\\", "\\\\").replace('"', '\\"')
    return result.replace("\n", "\\\n")


def value_pattern(key: str) -> re.Pattern[str]:
    """Pattern matching ``["key"] = "value"``; group 1 is the raw value."""
    return re.compile(
        r'\[\s*"' + re.escape(key) + r'"\s*\]\s*=\s*"((?:[^"\\]|\\.)*)"',
        re.DOTALL,
    )


def resolve(dictionary_text: str, key: str) -> str | None:
    """Return the unescaped value stored under ``key``, or None if absent."""
    if not dictionary_text or not key:
        return None
    match = value_pattern(key).search(dictionary_text)
    if match is None:
        return None
    return unescape_lua_string(match.group(1))


def is_dict_key(value: str | None) -> bool:
    return bool(value) and value.startswith(DICT_KEY_PREFIX)


def resolve_display(dictionary_text: str, raw: str) -> str:
    """Resolve ``raw`` if it is an indirection key, else return it unchanged.

    Unresolvable keys fall back to the raw key string.
    """
    if not is_dict_key(raw):
        return raw
    resolved = resolve(dictionary_text, raw)
    return resolved if resolved is not None else raw
