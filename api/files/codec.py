"""
Translate file payloads between their transport form (base64 text)
and their stored form (raw bytes).
"""

import base64
import binascii

from core.exceptions import EncodingError


def decode_payload(text: str) -> bytes:
    """
    Decode a standard, padded base64 string.

    Only the canonical encoding of a byte string is accepted, so
    encode_payload(decode_payload(text)) == text always holds.

    Raises:
        EncodingError: if text is not valid base64
    """
    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 payload: {e}") from e

    # Non-zero trailing bits or excess padding
    if base64.b64encode(data) != text.encode("ascii"):
        raise EncodingError("Invalid base64 payload: non-canonical encoding")
    return data


def encode_payload(data: bytes) -> str:
    """Encode raw bytes as standard, padded base64"""
    return base64.b64encode(data).decode("ascii")
