"""Mission archive (``.miz``) access.

A ``.miz`` file is a plain zip container::

    mission                      serialized mission table
    l10n/DEFAULT/dictionary      localized strings (DictKey_... = "text")
    l10n/DEFAULT/*.png|jpg|...   briefing images
    KNEEBOARD/*.png|jpg|...      kneeboard pages

The file is opened read-only without locking, so an archive that the
simulator or mission editor holds open can still be read.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from mizreader.errors import ArchiveError

logger = logging.getLogger(__name__)

MISSION_ENTRY = "mission"
DICTIONARY_ENTRY = "l10n/DEFAULT/dictionary"
BRIEFING_IMAGE_PREFIX = "l10n/DEFAULT/"
KNEEBOARD_PREFIX = "KNEEBOARD/"
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp")


def decode_text(data: bytes) -> str:
    """Decode entry text as UTF-8 (BOM tolerated), falling back to Latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _normalize(name: str) -> str:
    return name.replace("\\", "/")


class MizArchive:
    """Read-only view over the entries of one mission archive.

    Use as a context manager; the underlying file handle is released on
    every exit path::

        with MizArchive.open(path) as archive:
            text = archive.read_text(MISSION_ENTRY)
    """

    def __init__(self, path: Path, handle: BinaryIO, zf: zipfile.ZipFile):
        self.path = path
        self._handle = handle
        self._zip = zf
        self._entries = {_normalize(info.filename): info for info in zf.infolist()}

    @classmethod
    def open(cls, path: str | Path) -> MizArchive:
        """Open ``path`` as a mission archive.

        Raises:
            ArchiveError: the path is unreadable or not a zip archive.
        """
        path = Path(path)
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise ArchiveError(str(path), exc.strerror or str(exc)) from exc
        try:
            zf = zipfile.ZipFile(handle)
        except (zipfile.BadZipFile, OSError) as exc:
            handle.close()
            raise ArchiveError(str(path), f"not a valid mission archive ({exc})") from exc
        return cls(path, handle, zf)

    def close(self) -> None:
        try:
            self._zip.close()
        finally:
            self._handle.close()

    def __enter__(self) -> MizArchive:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Entry lookup
    # ------------------------------------------------------------------

    def _info(self, name: str) -> zipfile.ZipInfo | None:
        name = _normalize(name)
        info = self._entries.get(name)
        if info is None:
            lowered = name.lower()
            for entry_name, candidate in self._entries.items():
                if entry_name.lower() == lowered:
                    return candidate
        return info

    def has_entry(self, name: str) -> bool:
        return self._info(name) is not None

    def list_entries(self, prefix: str, extensions: Iterable[str] = IMAGE_EXTENSIONS) -> list[str]:
        """Entries under ``prefix`` with one of ``extensions`` (case-insensitive)."""
        prefix = _normalize(prefix).lower()
        exts = tuple(ext.lower() for ext in extensions)
        return [
            name
            for name, info in self._entries.items()
            if not info.is_dir()
            and name.lower().startswith(prefix)
            and name.lower().endswith(exts)
        ]

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_bytes(self, name: str) -> bytes:
        """Raw entry content; ``b""`` when the entry is absent.

        Raises:
            ArchiveError: the entry exists but cannot be decompressed, including
                entries stored with an unsupported method such as deflate64.
        """
        info = self._info(name)
        if info is None:
            return b""
        try:
            return self._zip.read(info)
        except (
            zipfile.BadZipFile, zlib.error, OSError, EOFError, NotImplementedError
        ) as exc:
            raise ArchiveError(str(self.path), f"corrupt entry {name!r} ({exc})") from exc

    def read_text(self, name: str) -> str:
        """Decoded entry text; ``""`` when the entry is absent."""
        data = self.read_bytes(name)
        return decode_text(data) if data else ""

    def iter_lines(self, name: str) -> Iterator[str]:
        """Stream an entry line by line without reading it whole.

        Yields nothing when the entry is absent.
        """
        info = self._info(name)
        if info is None:
            return
        with self._zip.open(info) as raw:
            reader = io.TextIOWrapper(raw, encoding="utf-8", errors="replace")
            yield from reader
