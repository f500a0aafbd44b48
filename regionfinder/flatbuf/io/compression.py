"""Compression utilities for the cache payload using zstandard (zstd)."""

import zstandard as zstd

from regionfinder.errors import CorruptDataError

# Higher compression level trades build speed for smaller artifacts
ZSTD_COMPRESSION_LEVEL = 19
ZSTD_MAGIC = b"\x28\xb5\x2f\xfd"


def compress_bytes(data: bytes, level: int = ZSTD_COMPRESSION_LEVEL) -> bytes:
    """Compress bytes using zstandard compression.

    NOTE: the output is deterministic for identical input, level and library version.

    Args:
        data: Uncompressed byte data
        level: Compression level (1-22, default 19 for high compression)

    Returns:
        Compressed byte data (a single zstd frame including the content size)
    """
    cctx = zstd.ZstdCompressor(level=level, write_content_size=True)
    return cctx.compress(data)


def is_compressed(data) -> bool:
    """Check for the zstandard frame magic number."""
    return bytes(data[:4]) == ZSTD_MAGIC


def decompress_bytes(data) -> bytes:
    """Decompress zstandard-compressed bytes.

    Args:
        data: Compressed byte data (bytes or memoryview)

    Returns:
        Decompressed byte data

    Raises:
        CorruptDataError: if the data is not a valid zstd frame
    """
    if not is_compressed(data):
        raise CorruptDataError("payload is flagged as compressed but lacks the zstd magic number")
    dctx = zstd.ZstdDecompressor()
    try:
        return dctx.decompress(data)
    except zstd.ZstdError as exc:
        raise CorruptDataError(f"decompressing the payload failed: {exc}") from exc
