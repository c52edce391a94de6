# Adapted from https://github.com/WTRMQDev/secp256k1-zkp-py/blob/master/secp256k1_zkp/__init__.py
from secp256k1 import PublicKey

from .backend import CurveBackend
from .codec import decode_point, encode_point
from .curves import Point
from .errors import PointAtInfinityError

class Secp256k1Backend(CurveBackend):
    """
    secp256k1 arithmetic through libsecp256k1.

    Install with the `secp256k1` extra. Only usable for the secp256k1 curve.
    """

    def __init__(self):
        super().__init__("secp256k1")

    def _pubkey(self, P: Point) -> PublicKey:
        return PublicKey(encode_point(P, compressed=False), raw=True)

    def _point(self, pubkey: PublicKey) -> Point:
        return decode_point(pubkey.serialize(compressed=False), self.curve)

    def mul(self, k: int, P: Point) -> Point:
        self.check(P)
        k = self._reduce(k)
        result = self._pubkey(P).tweak_mul(k.to_bytes(self.params.scalar_len, "big"))
        return self._point(result)

    def add(self, P: Point, Q: Point) -> Point:
        self.check(P, Q)
        if P.x == Q.x and P.y != Q.y:
            raise PointAtInfinityError("result is the point at infinity")
        new_pub = PublicKey()
        new_pub.combine([self._pubkey(P).public_key, self._pubkey(Q).public_key])
        return self._point(new_pub)
