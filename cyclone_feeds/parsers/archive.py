"""KMZ archive reader.

A KMZ product is a zip container that holds one KML document (and, for
some products, icon images). The reader opens the container from an
in-memory buffer, walks the entries in archive order and inflates only
the first entry whose name carries the markup extension.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib

from cyclone_feeds.core.constants import DEFAULT_MARKUP_EXTENSION, DEFAULT_MAX_MARKUP_BYTES
from cyclone_feeds.core.exceptions import CorruptArchiveError, NoMarkupEntryError

logger = logging.getLogger("cyclone_feeds.parsers.archive")


def read_markup_from_archive(
    data: bytes,
    *,
    extension: str = DEFAULT_MARKUP_EXTENSION,
    max_entry_bytes: int = DEFAULT_MAX_MARKUP_BYTES,
) -> str:
    """Return the text of the first markup entry in a zip archive.

    Args:
        data: Raw archive bytes.
        extension: Entry-name suffix to look for (case-insensitive).
        max_entry_bytes: Refuse entries whose uncompressed size is larger.

    Returns:
        The entry decoded as UTF-8 (a leading BOM is dropped).

    Raises:
        CorruptArchiveError: If the buffer is not a readable zip archive,
            the entry is oversized, or it is not valid UTF-8.
        NoMarkupEntryError: If no entry name ends with ``extension``.
    """
    with _open_archive(data) as archive:
        entry = _first_markup_entry(archive, extension)
        if entry is None:
            msg = f"No {extension} entry found in archive ({len(archive.infolist())} entries)"
            raise NoMarkupEntryError(msg)

        if entry.file_size > max_entry_bytes:
            msg = (
                f"Entry '{entry.filename}' is {entry.file_size} bytes uncompressed, "
                f"limit is {max_entry_bytes}"
            )
            raise CorruptArchiveError(msg)

        try:
            raw = archive.read(entry)
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            EOFError,
            OSError,
            NotImplementedError,
            RuntimeError,
        ) as exc:
            msg = f"Cannot read entry '{entry.filename}': {exc}"
            raise CorruptArchiveError(msg) from exc

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        msg = f"Entry '{entry.filename}' is not valid UTF-8: {exc}"
        raise CorruptArchiveError(msg) from exc

    logger.debug("Read markup entry %s (%d bytes)", entry.filename, len(raw))
    return text


def list_markup_entries(data: bytes, *, extension: str = DEFAULT_MARKUP_EXTENSION) -> list[str]:
    """Names of every entry ending with ``extension``, in archive order.

    Raises:
        CorruptArchiveError: If the buffer is not a readable zip archive.
    """
    suffix = extension.lower()
    with _open_archive(data) as archive:
        return [i.filename for i in archive.infolist() if _is_markup(i, suffix)]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _open_archive(data: bytes) -> zipfile.ZipFile:
    if not isinstance(data, bytes | bytearray | memoryview):
        msg = f"Archive payload must be bytes, got {type(data).__name__}"
        raise CorruptArchiveError(msg)
    if not data:
        msg = "Archive payload is empty"
        raise CorruptArchiveError(msg)
    try:
        return zipfile.ZipFile(io.BytesIO(bytes(data)))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
        msg = f"Cannot open archive: {exc}"
        raise CorruptArchiveError(msg) from exc


def _first_markup_entry(archive: zipfile.ZipFile, extension: str) -> zipfile.ZipInfo | None:
    suffix = extension.lower()
    for info in archive.infolist():
        if _is_markup(info, suffix):
            return info
    return None


def _is_markup(info: zipfile.ZipInfo, suffix: str) -> bool:
    return not info.is_dir() and info.filename.lower().endswith(suffix)
