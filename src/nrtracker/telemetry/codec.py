# src/nrtracker/telemetry/codec.py
"""Payload codec: canonical JSON, then gzip.

Either stage failing aborts the whole send; no partial payload is produced.

Numbers follow RFC 8785, which writes every number as its float64 value in
shortest form. An integral float such as 5.443314543118311e+16 is written
as 54433145431183110: the same float64 the backend parses, but a plain
json.loads() reads it back as int. Decode with parse_int=float to compare
against the original values.
"""

import gzip
import zlib
from typing import Any

from nrtracker.contracts.errors import CompressionError, SerializationError
from nrtracker.core.canonical import canonical_json_bytes


class PayloadCodec:
    """Serialize wire objects to canonical JSON and gzip them.

    Args:
        compress_level: gzip level 1 (fastest) to 9 (smallest). Default 9.
    """

    def __init__(self, compress_level: int = 9) -> None:
        if not 1 <= compress_level <= 9:
            raise ValueError(f"compress_level must be in 1..9, got {compress_level}")
        self._compress_level = compress_level

    def encode(self, obj: Any) -> bytes:
        """Canonical JSON bytes for obj.

        Raises:
            SerializationError: Non-finite floats, cycles, unsupported types
        """
        try:
            return canonical_json_bytes(obj)
        except (ValueError, TypeError) as e:
            raise SerializationError(f"payload could not be created: {e}") from e

    def compress(self, data: bytes) -> bytes:
        """gzip-compress data.

        Raises:
            CompressionError: If the gzip writer fails
        """
        try:
            return gzip.compress(data, compresslevel=self._compress_level)
        except (OSError, zlib.error, TypeError) as e:
            raise CompressionError(f"payload could not be zipped: {e}") from e

    def decompress(self, data: bytes) -> bytes:
        """Inverse of compress().

        Raises:
            CompressionError: If data is not a valid gzip stream
        """
        try:
            return gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise CompressionError(f"payload could not be unzipped: {e}") from e

    def encode_compressed(self, obj: Any) -> bytes:
        """compress(encode(obj))."""
        return self.compress(self.encode(obj))
