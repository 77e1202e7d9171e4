"""
Decompression of gzip-compressed kernel module files (.ko.gz).
"""

import gzip
import io
import zlib

from .errors import CorruptCompressionStream

# Upper bound on the inflated size of a single module image.
MAX_DECOMPRESSED_SIZE = 256 * 1024 * 1024

CHUNK_SIZE = 64 * 1024


def decompress(data: bytes, max_size: int = MAX_DECOMPRESSED_SIZE) -> bytes:
    """
    Inflate a gzip stream holding one module binary.

    The stream is read in chunks until its end-of-stream marker, so the
    inflated size does not need to be known in advance.

    Args:
        data: Compressed bytes as read from the module file
        max_size: Largest inflated size accepted

    Returns:
        bytes: The raw module image

    Raises:
        CorruptCompressionStream: If the header or checksum is invalid, the
            stream is truncated or empty, or it inflates past max_size
    """
    if not data:
        raise CorruptCompressionStream("Empty compressed stream")

    chunks = []
    total = 0
    try:
        with gzip.GzipFile(fileobj=io.BytesIO(data), mode='rb') as reader:
            while True:
                chunk = reader.read(CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > max_size:
                    raise CorruptCompressionStream(
                        f"Decompressed size exceeds limit of {max_size} bytes")
                chunks.append(chunk)
    except (OSError, EOFError, zlib.error) as e:
        raise CorruptCompressionStream(f"Invalid gzip stream: {e}") from e

    return b''.join(chunks)
