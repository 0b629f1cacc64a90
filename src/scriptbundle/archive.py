"""
Archive packager.

Serializes bundled documents into a single uncompressed zip, one entry per
script, and encodes the archive for transmission over stdout.
"""

import base64
import io
import time
import zipfile
from typing import Iterable

from scriptbundle.model import BundledDocument

ENTRY_MODE = 0o755


def entry_name(script_name: str, extension: str = "py") -> str:
    return f"{script_name}.{extension}"


def create_archive(documents: Iterable[BundledDocument], extension: str = "py") -> bytes:
    """
    Build a zip archive from bundled documents.

    Each document becomes "<script_name>.<extension>" holding its lines
    joined by single newlines. Entries are stored, not compressed.
    Duplicate script names are written as duplicate entries; zipfile emits
    its own warning for them.

    Args:
        documents: Bundled documents in the order they were requested
        extension: File extension of the entries

    Returns:
        Raw bytes of the zip archive
    """
    buffer = io.BytesIO()
    timestamp = time.localtime()[:6]

    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as zf:
        for document in documents:
            info = zipfile.ZipInfo(entry_name(document.script_name, extension), date_time=timestamp)
            info.compress_type = zipfile.ZIP_STORED
            info.external_attr = (0o100000 | ENTRY_MODE) << 16
            zf.writestr(info, document.text.encode("utf-8"))

    return buffer.getvalue()


def encode_archive(archive: bytes) -> str:
    """Base64 (standard alphabet, padded) text of an archive."""
    return base64.b64encode(archive).decode("ascii")


def write_archive(archive: bytes, filename: str) -> None:
    """Save archive bytes to a file."""
    with open(filename, "wb") as f:
        f.write(archive)


__all__ = ["create_archive", "encode_archive", "write_archive", "entry_name"]
