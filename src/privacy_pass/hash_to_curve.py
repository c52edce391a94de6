import hashlib

from .codec import TAG_EVEN, TAG_ODD, decompress_point
from .curves import DEFAULT_CURVE, Point, get_curve
from .errors import CurveMissError, DecodeError

SEED_LENGTH = 32
MAX_COUNTER = 10

def derive_token_point(seed: bytes, curve: str = DEFAULT_CURVE) -> Point:
    """
    Deterministically maps a token seed to a curve point.

    Each attempt hashes SHA256(separator || seed || le32(counter)) and tries the
    digest as a compressed x coordinate, even tag first.

    Parameters:
        seed (bytes): 32 random bytes, the token preimage.
        curve (str): The curve identifier.

    Returns:
        Point: The token point.

    Raises:
        DecodeError: The seed is not SEED_LENGTH bytes.
        CurveMissError: No counter in [0, 9] gave a valid point.
    """
    if len(seed) != SEED_LENGTH:
        raise DecodeError(f"seed must be {SEED_LENGTH} bytes, got {len(seed)}")
    separator = get_curve(curve).separator

    for counter in range(MAX_COUNTER):
        digest = hashlib.sha256(
            separator + seed + counter.to_bytes(4, "little")
        ).digest()
        for tag in (TAG_EVEN, TAG_ODD):
            point = decompress_point(digest, tag, curve)
            if point is not None:
                return point

    raise CurveMissError(f"no {curve} point found after {MAX_COUNTER} attempts")
