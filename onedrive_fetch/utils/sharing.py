"""
Utilities for turning shareable links into Graph share ids and back.
"""

import base64
import binascii

SHARE_ID_PREFIX = "u!"


def encode_share_link(link: str) -> str:
    """
    Encodes a sharing URL as a Graph share id.

    The URL is base64-encoded, made URL-safe ('/' -> '_', '+' -> '-'), stripped
    of its '=' padding and prefixed with 'u!'.
    """
    encoded = base64.b64encode(link.encode("utf-8")).decode("ascii")
    encoded = encoded.replace("/", "_").replace("+", "-").rstrip("=")
    return f"{SHARE_ID_PREFIX}{encoded}"


def decode_share_link(share_id: str) -> str:
    """
    Recovers the sharing URL from a share id produced by encode_share_link.

    Raises:
        ValueError: If the value is not a 'u!' share id or is not valid base64.
    """
    if not share_id.startswith(SHARE_ID_PREFIX):
        raise ValueError(f"Share id must start with '{SHARE_ID_PREFIX}'.")

    encoded = share_id[len(SHARE_ID_PREFIX) :].replace("_", "/").replace("-", "+")
    encoded += "=" * (-len(encoded) % 4)
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid share id: {e}") from e
