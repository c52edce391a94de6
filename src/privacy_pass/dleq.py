"""
Batched DLEQ (Chaum-Pedersen) proof verification.

The issuer proves knowledge of one x with H = xG and Z = xM, where M and Z are
random linear combinations of every blinded point it received and every
signed point it returned. Coefficients come from a SHAKE256 stream seeded by
the hash of all points, so client and issuer derive the same composites.
"""
import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .backend import CurveBackend, get_backend
from .codec import (
    b64decode,
    decode_b64_point,
    decode_json,
    decode_scalar,
    decode_scalar_bytes,
    encode_point,
)
from .config import IssuerConfig
from .curves import Point
from .errors import (
    CommitmentMismatchError,
    CurveMismatchError,
    DecodeError,
    DigestInequalityError,
    InconsistentProofError,
    PointAtInfinityError,
    ProofIncompleteError,
    VerificationError,
)

logger = logging.getLogger("privacy_pass.dleq")

BATCH_PROOF_PREFIX = b"batch-proof="

@dataclass
class DLEQProof:
    G: Optional[Point] = None
    H: Optional[Point] = None
    M: Optional[Point] = None
    Z: Optional[Point] = None
    R: Optional[int] = None
    C: Optional[bytes] = None

    @property
    def points(self) -> List[Point]:
        return [self.G, self.H, self.M, self.Z]

@dataclass
class BatchProof:
    P: DLEQProof
    M: Optional[List[Point]] = None
    Z: Optional[List[Point]] = None
    # legacy field, decoded but not interpreted
    C: List[bytes] = field(default_factory=list)

def challenge(G: Point, H: Point, M: Point, Z: Point, A: Point, B: Point) -> bytes:
    h = hashlib.sha256()
    for P in (G, H, M, Z, A, B):
        h.update(encode_point(P))
    return h.digest()

def shake_scalars(seed: bytes, count: int, order: int) -> List[int]:
    """
    Reads `count` scalars in [1, order-1] from a SHAKE256(seed) stream, rejecting
    out of range chunks.
    """
    size = (order.bit_length() + 7) // 8
    mask = (1 << order.bit_length()) - 1
    shake = hashlib.shake_256(seed)
    stream = b""
    offset = 0
    scalars = []
    while len(scalars) < count:
        if offset + size > len(stream):
            stream = shake.digest(len(stream) + size * (count - len(scalars) + 1))
        c = int.from_bytes(stream[offset:offset + size], "big") & mask
        offset += size
        if 0 < c < order:
            scalars.append(c)
    return scalars

def compute_composites(
    G: Point,
    H: Point,
    M: Sequence[Point],
    Z: Sequence[Point],
    backend: Optional[CurveBackend] = None,
) -> Tuple[Point, Point]:
    """
    Recomputes the composite points a batch proof is made over.

    Parameters:
        G (Point), H (Point): The issuer commitments.
        M (Sequence[Point]): Blinded points, in request order.
        Z (Sequence[Point]): Signed points, in response order.
        backend (Optional[CurveBackend]): Arithmetic backend.

    Returns:
        Tuple[Point, Point]: The composites (sum c_i*M_i, sum c_i*Z_i).
    """
    backend = backend or get_backend(G.curve)
    h = hashlib.sha256()
    for P in [G, H, *M, *Z]:
        h.update(encode_point(P))
    coefficients = shake_scalars(h.digest(), len(M), G.params.r)

    composite_M = backend.sum(backend.mul(c, Mi) for c, Mi in zip(coefficients, M))
    composite_Z = backend.sum(backend.mul(c, Zi) for c, Zi in zip(coefficients, Z))
    return composite_M, composite_Z

def get_marshaled_batch_proof(data) -> dict:
    """Base64 decodes the batch proof, strips the optional prefix and parses the JSON."""
    raw = b64decode(data)
    if raw.startswith(BATCH_PROOF_PREFIX):
        raw = raw[len(BATCH_PROOF_PREFIX):]
    obj = decode_json(raw)
    if not isinstance(obj, dict):
        raise DecodeError("batch proof is not a JSON object")
    return obj

def parse_dleq_proof(data, curve: str) -> DLEQProof:
    """
    Parses the nested DLEQ proof. Missing fields are left as None for the
    completeness check; present but malformed ones raise DecodeError.
    """
    obj = decode_json(b64decode(data))
    if not isinstance(obj, dict):
        raise DecodeError("DLEQ proof is not a JSON object")

    def point(name):
        return decode_b64_point(obj[name], curve) if obj.get(name) else None

    return DLEQProof(
        G=point("G"),
        H=point("H"),
        M=point("M"),
        Z=point("Z"),
        R=decode_scalar(obj["R"], curve) if obj.get("R") else None,
        C=decode_scalar_bytes(obj["C"], curve) if obj.get("C") else None,
    )

def unmarshal_batch_proof(obj: dict, curve: str) -> BatchProof:
    def points(name):
        values = obj.get(name)
        if values is None:
            return None
        if not isinstance(values, list):
            raise DecodeError(f"batch proof field {name} is not a list")
        return [decode_b64_point(v, curve) for v in values]

    if not obj.get("P"):
        raise ProofIncompleteError("batch proof has no DLEQ proof")
    legacy = obj.get("C") or []
    if not isinstance(legacy, list):
        raise DecodeError("batch proof field C is not a list")

    return BatchProof(
        P=parse_dleq_proof(obj["P"], curve),
        M=points("M"),
        Z=points("Z"),
        C=[b64decode(c) for c in legacy],
    )

def parse_batch_proof(data, curve: str) -> BatchProof:
    return unmarshal_batch_proof(get_marshaled_batch_proof(data), curve)

def verify_dleq(proof: DLEQProof, backend: Optional[CurveBackend] = None) -> bool:
    """
    Checks a single DLEQ proof: recomputes A = cH + rG, B = cZ + rM and
    compares SHA256(G, H, M, Z, A, B) against the received challenge.
    """
    backend = backend or get_backend(proof.G.curve)
    c = int.from_bytes(proof.C, "big")
    try:
        A = backend.add(backend.mul(c, proof.H), backend.mul(proof.R, proof.G))
        B = backend.add(backend.mul(c, proof.Z), backend.mul(proof.R, proof.M))
    except PointAtInfinityError as e:
        raise DigestInequalityError("degenerate proof values") from e

    digest = challenge(proof.G, proof.H, proof.M, proof.Z, A, B)
    if not hmac.compare_digest(digest, proof.C):
        logger.debug(f"computed digest {digest.hex()}, received {proof.C.hex()}")
        raise DigestInequalityError("recomputed digest does not equal received digest")
    return True

def _check_complete(batch: BatchProof):
    dleq = batch.P
    if dleq is None:
        raise ProofIncompleteError("batch proof has no DLEQ proof")
    if dleq.G is None or dleq.H is None:
        raise ProofIncompleteError("batch proof does not contain commitments")
    if dleq.M is None or dleq.Z is None or dleq.R is None or dleq.C is None:
        raise ProofIncompleteError("DLEQ proof has components that are not defined")
    if batch.M is None or batch.Z is None or len(batch.M) != len(batch.Z):
        raise ProofIncompleteError("point sets for batch proof are incorrect")

def _check_curves(curve: str, *groups: Sequence[Point]):
    for group in groups:
        for P in group:
            if P.curve != curve:
                raise CurveMismatchError(f"point on {P.curve} where {curve} was expected")

def _check_consistent(batch, blinded_points, signed_points, backend):
    if len(batch.M) != len(blinded_points) or len(batch.Z) != len(signed_points):
        raise InconsistentProofError(
            f"proof covers {len(batch.M)} tokens, {len(blinded_points)} sent "
            f"and {len(signed_points)} signed"
        )
    for Mi, Ti in zip(batch.M, blinded_points):
        if encode_point(Mi) != encode_point(Ti):
            raise InconsistentProofError("tokens are inconsistent with sent proof")
    for Zi, Si in zip(batch.Z, signed_points):
        if encode_point(Zi) != encode_point(Si):
            raise InconsistentProofError("signatures are inconsistent with sent proof")

    try:
        M, Z = compute_composites(batch.P.G, batch.P.H, batch.M, batch.Z, backend)
    except PointAtInfinityError as e:
        raise InconsistentProofError("composite point is the identity") from e
    if M != batch.P.M or Z != batch.P.Z:
        raise InconsistentProofError("proof composites do not match the exchanged points")

def verify_batch_proof(
    batch: BatchProof,
    blinded_points: Sequence[Point],
    signed_points: Sequence[Point],
    config: IssuerConfig,
    backend: Optional[CurveBackend] = None,
) -> bool:
    """
    Verifies a batch DLEQ proof against the points actually exchanged.

    All or nothing: any failing gate rejects the whole batch.

    Parameters:
        batch (BatchProof): The parsed batch proof.
        blinded_points (Sequence[Point]): The client's blinded points, in request order.
        signed_points (Sequence[Point]): The issuer's signed points, in response order.
        config (IssuerConfig): The trusted commitments.
        backend (Optional[CurveBackend]): Arithmetic backend.

    Returns:
        bool: True. Rejection is signalled by raising.

    Raises:
        ProofIncompleteError, CurveMismatchError, CommitmentMismatchError,
        InconsistentProofError, DigestInequalityError
    """
    backend = backend or get_backend(config.curve)
    try:
        _check_complete(batch)
        dleq = batch.P
        _check_curves(config.curve, dleq.points, batch.M, batch.Z, blinded_points, signed_points)
        backend.check(config.G)

        if encode_point(dleq.G) != encode_point(config.G) or encode_point(dleq.H) != encode_point(config.H):
            raise CommitmentMismatchError("mismatch between stored and received commitments")

        _check_consistent(batch, blinded_points, signed_points, backend)
        return verify_dleq(dleq, backend)
    except VerificationError as e:
        logger.warning(f"batch proof rejected ({e.__class__.__name__}): {e}")
        raise

def check_batch_proof(*args, **kwargs) -> bool:
    """Like verify_batch_proof, but returns False instead of raising on rejection."""
    try:
        return verify_batch_proof(*args, **kwargs)
    except VerificationError:
        return False
