from dataclasses import dataclass
from typing import Any, Dict

from .codec import b64decode, b64encode, decode_b64_point, encode_b64_point
from .curves import CURVES, Point
from .errors import DecodeError
from .hash_to_curve import SEED_LENGTH, derive_token_point

@dataclass(frozen=True)
class Token:
    preimage: bytes
    point: Point

    def __repr__(self):
        return f"Token({self.preimage.hex()[:16]}...)"

@dataclass(frozen=True)
class BlindedToken:
    token: Token
    blind: int
    blinded_point: Point

    def __repr__(self):
        # keep the blinding factor out of logs
        return f"BlindedToken({self.token!r})"

@dataclass(frozen=True)
class SignedToken:
    token: Token
    blind: int
    signed_point: Point

    def __repr__(self):
        return f"SignedToken({self.token!r})"

    def to_storable(self) -> "StorableToken":
        return StorableToken(
            curve=self.signed_point.curve,
            preimage=self.token.preimage,
            point=encode_b64_point(self.signed_point),
            blind=format(self.blind, "x"),
        )

@dataclass(frozen=True)
class StorableToken:
    """
    Flat, acyclic form of a SignedToken for persistence.

    Attributes:
        curve (str): The curve identifier.
        preimage (bytes): The token preimage.
        point (str): base64 SEC1 uncompressed signed point, still blinded.
        blind (str): Hex blinding factor.
    """
    curve: str
    preimage: bytes
    point: str
    blind: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "curve": self.curve,
            "token": b64encode(self.preimage),
            "point": self.point,
            "blind": self.blind,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        try:
            return cls(
                curve=data["curve"],
                preimage=b64decode(data["token"]),
                point=data["point"],
                blind=data["blind"],
            )
        except (KeyError, TypeError) as e:
            raise DecodeError(f"malformed stored token: {e}") from e

    def to_signed_token(self) -> SignedToken:
        if not isinstance(self.curve, str) or self.curve not in CURVES:
            raise DecodeError(f"stored token names an unknown curve: {self.curve!r}")
        try:
            blind = int(self.blind, 16)
        except (TypeError, ValueError) as e:
            raise DecodeError("stored blinding factor is not hex") from e
        if len(self.preimage) != SEED_LENGTH:
            raise DecodeError(f"stored preimage must be {SEED_LENGTH} bytes")
        token = Token(self.preimage, derive_token_point(self.preimage, self.curve))
        return SignedToken(
            token=token,
            blind=blind,
            signed_point=decode_b64_point(self.point, self.curve),
        )
