import logging
from typing import Dict

import ecdsa
from ecdsa.ellipticcurve import INFINITY, PointJacobi

from .curves import DEFAULT_CURVE, CurveParams, Point, get_curve
from .errors import CurveMismatchError, PointAtInfinityError

logger = logging.getLogger("privacy_pass.backend")

class CurveBackend:
    """
    Group arithmetic for one curve. Points stay plain values; a backend turns
    them into whatever its library works with and back.
    """
    curve: str

    def __init__(self, curve: str = DEFAULT_CURVE):
        self.curve = curve
        self.params: CurveParams = get_curve(curve)

    def check(self, *points: Point):
        for P in points:
            if P.curve != self.curve:
                raise CurveMismatchError(
                    f"{self.__class__.__name__} works on {self.curve}, got a point on {P.curve}"
                )

    def generator(self) -> Point:
        return Point(self.curve, self.params.gx, self.params.gy)

    def mul(self, k: int, P: Point) -> Point:
        raise NotImplementedError

    def add(self, P: Point, Q: Point) -> Point:
        raise NotImplementedError

    def base_mul(self, k: int) -> Point:
        return self.mul(k, self.generator())

    def sum(self, points) -> Point:
        points = list(points)
        if not points:
            raise PointAtInfinityError("empty sum")
        acc = points[0]
        for P in points[1:]:
            acc = self.add(acc, P)
        return acc

    def _reduce(self, k: int) -> int:
        k %= self.params.r
        if k == 0:
            raise PointAtInfinityError("scalar is zero mod the group order")
        return k

_ECDSA_CURVES = {
    "P-256": ecdsa.NIST256p,
    "secp256k1": ecdsa.SECP256k1,
}

class EcdsaBackend(CurveBackend):
    """Pure python arithmetic from python-ecdsa, in Jacobian coordinates."""

    def __init__(self, curve: str = DEFAULT_CURVE):
        super().__init__(curve)
        if curve not in _ECDSA_CURVES:
            raise CurveMismatchError(f"python-ecdsa backend has no curve {curve!r}")
        self._curve = _ECDSA_CURVES[curve]

    def _to_jacobian(self, P: Point) -> PointJacobi:
        return PointJacobi(self._curve.curve, P.x, P.y, 1, self._curve.order)

    def _from_jacobian(self, J) -> Point:
        if J == INFINITY:
            raise PointAtInfinityError("result is the point at infinity")
        return Point(self.curve, J.x(), J.y())

    def mul(self, k: int, P: Point) -> Point:
        self.check(P)
        k = self._reduce(k)
        return self._from_jacobian(self._to_jacobian(P) * k)

    def base_mul(self, k: int) -> Point:
        k = self._reduce(k)
        return self._from_jacobian(self._curve.generator * k)

    def add(self, P: Point, Q: Point) -> Point:
        self.check(P, Q)
        return self._from_jacobian(self._to_jacobian(P) + self._to_jacobian(Q))

_backends: Dict[str, CurveBackend] = {}

def get_backend(curve: str = DEFAULT_CURVE) -> CurveBackend:
    """Shared default backend for a curve."""
    if curve not in _backends:
        logger.debug(f"creating default backend for {curve}")
        _backends[curve] = EcdsaBackend(curve)
    return _backends[curve]
