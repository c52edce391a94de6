from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from .codec import decode_b64_point, decode_json, encode_b64_point
from .curves import DEFAULT_CURVE, Point
from .errors import CurveMismatchError, DecodeError

@dataclass(frozen=True)
class IssuerConfig:
    """
    The issuer's public commitments (G, H = xG) for one key epoch.

    Trusted a priori and passed into every proof verification.
    """
    G: Point
    H: Point

    def __post_init__(self):
        if self.G.curve != self.H.curve:
            raise CurveMismatchError("commitments G and H are on different curves")

    @property
    def curve(self) -> str:
        return self.G.curve

    @classmethod
    def from_dict(cls, data: Dict[str, Any], curve: str = DEFAULT_CURVE):
        if not isinstance(data, dict) or "G" not in data or "H" not in data:
            raise DecodeError("commitments config needs both 'G' and 'H'")
        return cls(
            G=decode_b64_point(data["G"], curve),
            H=decode_b64_point(data["H"], curve),
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes], curve: str = DEFAULT_CURVE):
        return cls.from_dict(decode_json(data), curve)

    @classmethod
    def from_file(cls, path: Union[str, Path], curve: str = DEFAULT_CURVE):
        return cls.from_json(Path(path).read_bytes(), curve)

    def to_dict(self) -> Dict[str, str]:
        return {
            "G": encode_b64_point(self.G),
            "H": encode_b64_point(self.H),
        }

MAX_MINT_ATTEMPTS = 8

@dataclass
class ClientSettings:
    """
    Client policy knobs.

    Attributes:
        curve (str): Curve used for minting.
        require_proof (bool): Reject issuance responses without a batch proof.
        max_mint_attempts (int): Seeds drawn per token before giving up on hash-to-curve.
    """
    curve: str = DEFAULT_CURVE
    require_proof: bool = True
    max_mint_attempts: int = MAX_MINT_ATTEMPTS

    def __post_init__(self):
        if self.max_mint_attempts < 1:
            raise ValueError(f"max_mint_attempts must be at least 1, got {self.max_mint_attempts}")
