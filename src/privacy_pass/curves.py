from dataclasses import dataclass
from typing import Dict

from .errors import CurveMismatchError

DEFAULT_CURVE = "P-256"

@dataclass(frozen=True)
class CurveParams:
    """
    Short Weierstrass curve y^2 = x^3 + a*x + b over GF(p) with a prime
    order subgroup of order r generated by (gx, gy).

    Attributes:
        name (str): The identifier carried by every Point on this curve.
        p (int): Field prime. Every configured curve has p = 3 mod 4.
        a (int): Curve coefficient a.
        b (int): Curve coefficient b.
        r (int): Group order.
        gx (int): Generator x coordinate.
        gy (int): Generator y coordinate.
        separator (bytes): Hash-to-curve domain separator.
    """
    name: str
    p: int
    a: int
    b: int
    r: int
    gx: int
    gy: int
    separator: bytes

    @property
    def byte_len(self) -> int:
        return (self.p.bit_length() + 7) // 8

    @property
    def scalar_len(self) -> int:
        return (self.r.bit_length() + 7) // 8

    def contains(self, x: int, y: int) -> bool:
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False
        return (y * y - (x * x * x + self.a * x + self.b)) % self.p == 0

_P256_P = int('FFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF', 16)
_SECP256K1_P = int('FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F', 16)

# Read-only table, points refer to it by name only
CURVES: Dict[str, CurveParams] = {
    "P-256": CurveParams(
        name="P-256",
        p=_P256_P,
        a=_P256_P - 3,
        b=int('5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B', 16),
        r=int('FFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551', 16),
        gx=int('6B17D1F2E12C4247F8BCE6E563A440F277037D812DEB33A0F4A13945D898C296', 16),
        gy=int('4FE342E2FE1A7F9B8EE7EB4A7C0F9E162BCE33576B315ECECBB6406837BF51F5', 16),
        # "1.2.840.10045.3.1.7 point generation seed"
        separator=bytes.fromhex(
            "312e322e3834302e31303034352e332e312e3720706f696e742067656e65726174696f6e2073656564"
        ),
    ),
    "secp256k1": CurveParams(
        name="secp256k1",
        p=_SECP256K1_P,
        a=0,
        b=7,
        r=int('FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141', 16),
        gx=int('79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798', 16),
        gy=int('483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8', 16),
        # "1.3.132.0.10 point generation seed"
        separator=bytes.fromhex(
            "312e332e3133322e302e313020706f696e742067656e65726174696f6e2073656564"
        ),
    ),
}

def get_curve(name: str) -> CurveParams:
    try:
        return CURVES[name]
    except KeyError:
        raise CurveMismatchError(f"unknown curve {name!r}") from None

@dataclass(frozen=True)
class Point:
    """
    Affine point on a configured curve. Holds coordinates and the curve name
    only; the point at infinity is not representable.
    """
    curve: str
    x: int
    y: int

    def __post_init__(self):
        params = get_curve(self.curve)
        if not params.contains(self.x, self.y):
            raise CurveMismatchError(f"point is not on curve {self.curve}")

    @property
    def params(self) -> CurveParams:
        return CURVES[self.curve]

    def __repr__(self):
        return f"Point({self.curve}, x={self.x:x})"

def generator(curve: str = DEFAULT_CURVE) -> Point:
    params = get_curve(curve)
    return Point(curve, params.gx, params.gy)

def div2(M, x):
    """Helper routine to compute x/2 mod M (where M is odd)."""
    assert M & 1
    if x & 1: # If x is odd, make it even by adding M.
        x += M
    # x must be even now, so a clean division by 2 is possible.
    return x >> 1

# safegcd (constant-time):
def modinv(M, x):
    """Compute the inverse of x mod M (given that it exists, and M is odd)."""
    assert M & 1
    delta, f, g, d, e = 1, M, x % M, 0, 1
    while g != 0:
        # Division by two for f and g is only ever done on even inputs,
        # d and e go through div2.
        if delta > 0 and g & 1:
            delta, f, g, d, e = 1 - delta, g, (g - f) // 2, e, div2(M, e - d)
        elif g & 1:
            delta, f, g, d, e = 1 + delta, f, (g + f) // 2, d, div2(M, e + d)
        else:
            delta, f, g, d, e = 1 + delta, f, (g    ) // 2, d, div2(M, e    )
    if f not in (1, -1):
        # |f| is the GCD
        raise ZeroDivisionError(f"{x} is not invertible mod {M}")
    # d = f/x (mod M) and |f| = 1, so 1/x = d*f.
    return (d * f) % M
