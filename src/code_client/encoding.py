"""Bundle payload encoding: JSON, then base64, then gzip.

The service expects bundle create/extend bodies as an opaque octet stream
sent with ``content-encoding: gzip``.  The gzip member wraps the base64
text of the JSON document rather than the JSON itself.
"""

from __future__ import annotations

import base64
import gzip
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def compress_and_encode(payload: Any) -> bytes:
    """Serialise *payload* to JSON, base64-encode it, and gzip the result."""
    encoded = base64.b64encode(json.dumps(payload).encode("utf-8"))
    compressed = gzip.compress(encoded)
    logger.debug(
        "Encoded payload: %d base64 bytes -> %d gzip bytes",
        len(encoded),
        len(compressed),
    )
    return compressed


def decode_and_decompress(body: bytes) -> Any:
    """Inverse of :func:`compress_and_encode`."""
    return json.loads(base64.b64decode(gzip.decompress(body)).decode("utf-8"))
