"""
Curve codec.

Byte layouts follow SEC1 2.3.3 / 2.3.4 as produced by Go's elliptic.Marshal,
so every encoding has a fixed length for a given curve. Scalars travel as
fixed-width big-endian integers, base64 encoded.
"""
import base64
import binascii
import json
from typing import Any, Optional

from .curves import DEFAULT_CURVE, Point, get_curve
from .errors import DecodeError

TAG_EVEN = 0x02
TAG_ODD = 0x03
TAG_UNCOMPRESSED = 0x04

def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")

def b64decode(data) -> bytes:
    if isinstance(data, str):
        try:
            data = data.encode("ascii")
        except UnicodeEncodeError as e:
            raise DecodeError("base64 input is not ascii") from e
    if not isinstance(data, (bytes, bytearray)):
        raise DecodeError(f"expected base64 string, got {type(data).__name__}")
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise DecodeError(f"invalid base64: {e}") from e

def decode_json(data) -> Any:
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("JSON payload is not utf-8") from e
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeError(f"invalid JSON: {e}") from e

def decompress_point(x_bytes: bytes, tag: int, curve: str = DEFAULT_CURVE) -> Optional[Point]:
    """
    Attempts to decompress an x coordinate into a curve point.

    Uses y = rh^((p+1)/4) mod p, valid since p = 3 mod 4 on every configured curve.

    Parameters:
        x_bytes (bytes): Fixed-width big-endian x coordinate.
        tag (int): 0x02 for an even y, 0x03 for an odd y.
        curve (str): The curve identifier.

    Returns:
        Optional[Point]: The point, or None if x is not on the curve.
    """
    params = get_curve(curve)
    p = params.p
    x = int.from_bytes(x_bytes, "big")
    if x >= p:
        return None

    # y^2 = x^3 + ax + b (mod p)
    rh = (pow(x, 3, p) + params.a * x + params.b) % p
    y = pow(rh, (p + 1) // 4, p)
    if (y * y) % p != rh:
        return None

    if (y & 1) != (tag & 1):
        y = p - y
    if not params.contains(x, y):
        return None
    return Point(curve, x, y)

def decode_point(data: bytes, curve: str = DEFAULT_CURVE) -> Point:
    """
    Decodes a SEC1 point, compressed or uncompressed.

    Parameters:
        data (bytes): The encoding, tag byte included.
        curve (str): The curve the point must belong to.

    Returns:
        Point: The decoded point.

    Raises:
        DecodeError: Unknown tag, wrong length or a point off the curve.
    """
    params = get_curve(curve)
    n = params.byte_len
    if not data:
        raise DecodeError("empty point encoding")

    tag = data[0]
    if tag == TAG_UNCOMPRESSED:
        if len(data) != 1 + 2 * n:
            raise DecodeError(f"uncompressed {curve} point must be {1 + 2 * n} bytes, got {len(data)}")
        x = int.from_bytes(data[1:1 + n], "big")
        y = int.from_bytes(data[1 + n:], "big")
        if not params.contains(x, y):
            raise DecodeError(f"point is not on curve {curve}")
        return Point(curve, x, y)
    elif tag in (TAG_EVEN, TAG_ODD):
        if len(data) != 1 + n:
            raise DecodeError(f"compressed {curve} point must be {1 + n} bytes, got {len(data)}")
        point = decompress_point(data[1:], tag, curve)
        if point is None:
            raise DecodeError(f"x coordinate is not on curve {curve}")
        return point
    raise DecodeError(f"unrecognized point tag 0x{tag:02x}")

def encode_point(point: Point, compressed: bool = False) -> bytes:
    n = point.params.byte_len
    x = point.x.to_bytes(n, "big")
    if compressed:
        return bytes([TAG_EVEN | (point.y & 1)]) + x
    return bytes([TAG_UNCOMPRESSED]) + x + point.y.to_bytes(n, "big")

def decode_b64_point(data, curve: str = DEFAULT_CURVE) -> Point:
    return decode_point(b64decode(data), curve)

def encode_b64_point(point: Point, compressed: bool = False) -> str:
    return b64encode(encode_point(point, compressed))

def encode_scalar(k: int, curve: str = DEFAULT_CURVE) -> str:
    params = get_curve(curve)
    return b64encode(k.to_bytes(params.scalar_len, "big"))

def decode_scalar_bytes(data, curve: str = DEFAULT_CURVE) -> bytes:
    """Base64 decodes a scalar and checks its width, no range check."""
    params = get_curve(curve)
    raw = b64decode(data)
    if len(raw) != params.scalar_len:
        raise DecodeError(f"{curve} scalar must be {params.scalar_len} bytes, got {len(raw)}")
    return raw

def decode_scalar(data, curve: str = DEFAULT_CURVE, canonical: bool = True) -> int:
    k = int.from_bytes(decode_scalar_bytes(data, curve), "big")
    if canonical and k >= get_curve(curve).r:
        raise DecodeError(f"scalar is not reduced mod the {curve} group order")
    return k
