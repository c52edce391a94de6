from typing import Optional, Tuple

from .backend import CurveBackend, get_backend
from .curves import Point, modinv
from .rng import DEFAULT_RNG, RandomSource
from .errors import InvalidScalarError

def blind_point(
    point: Point,
    rng: Optional[RandomSource] = None,
    backend: Optional[CurveBackend] = None,
) -> Tuple[Point, int]:
    """
    Multiplies a point by a fresh blinding factor.

    Parameters:
        point (Point): The token point.
        rng (Optional[RandomSource]): Source of the blinding factor.
        backend (Optional[CurveBackend]): Arithmetic backend for the point's curve.

    Returns:
        Tuple[Point, int]: The blinded point and the blinding factor b in [1, r-1].
    """
    rng = rng or DEFAULT_RNG
    backend = backend or get_backend(point.curve)
    b = rng.random_scalar(point.params.r)
    return backend.mul(b, point), b

def unblind_point(blind: int, point: Point, backend: Optional[CurveBackend] = None) -> Point:
    """Returns (1/blind)*point."""
    backend = backend or get_backend(point.curve)
    r = point.params.r
    if blind % r == 0:
        raise InvalidScalarError("blinding factor has no inverse mod the group order")
    return backend.mul(modinv(r, blind), point)

def sign_point(key: int, point: Point, backend: Optional[CurveBackend] = None) -> Point:
    # Issuer side operation, the client never holds a signing key
    backend = backend or get_backend(point.curve)
    return backend.mul(key, point)
