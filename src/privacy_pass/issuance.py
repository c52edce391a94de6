import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .backend import CurveBackend, get_backend
from .blinding import blind_point
from .codec import b64decode, b64encode, decode_b64_point, decode_json, encode_b64_point
from .config import MAX_MINT_ATTEMPTS, IssuerConfig
from .curves import DEFAULT_CURVE, Point
from .dleq import parse_batch_proof, verify_batch_proof
from .errors import (
    CurveMissError,
    DecodeError,
    ProofIncompleteError,
    ProofVerificationFailure,
    VerificationError,
)
from .hash_to_curve import SEED_LENGTH, derive_token_point
from .models import BlindedToken, SignedToken, Token
from .rng import DEFAULT_RNG, RandomSource

logger = logging.getLogger("privacy_pass.issuance")

def create_blind_token(
    curve: str = DEFAULT_CURVE,
    rng: Optional[RandomSource] = None,
    backend: Optional[CurveBackend] = None,
) -> BlindedToken:
    """
    Draws a fresh preimage, maps it to the curve and blinds the point.

    Raises:
        CurveMissError: The drawn seed has no point, the caller should draw again.
    """
    rng = rng or DEFAULT_RNG
    preimage = rng.random_bytes(SEED_LENGTH)
    token = Token(preimage, derive_token_point(preimage, curve))
    blinded, blind = blind_point(token.point, rng, backend)
    return BlindedToken(token=token, blind=blind, blinded_point=blinded)

def mint_tokens(
    n: int,
    curve: str = DEFAULT_CURVE,
    rng: Optional[RandomSource] = None,
    backend: Optional[CurveBackend] = None,
    max_attempts: int = MAX_MINT_ATTEMPTS,
) -> List[BlindedToken]:
    """
    Mints n blinded tokens.

    A seed that misses the curve is discarded and a new one drawn, up to
    max_attempts seeds per token.

    Parameters:
        n (int): Number of tokens.
        curve (str): Curve identifier.
        rng (Optional[RandomSource]): Randomness for seeds and blinds.
        backend (Optional[CurveBackend]): Arithmetic backend.
        max_attempts (int): Seeds drawn per token before giving up.

    Returns:
        List[BlindedToken]: Exactly n tokens.
    """
    if n < 1:
        raise ValueError("must mint at least one token")
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
    backend = backend or get_backend(curve)

    tokens = []
    for _ in range(n):
        for attempt in range(max_attempts):
            try:
                tokens.append(create_blind_token(curve, rng, backend))
                break
            except CurveMissError:
                logger.debug(f"seed missed the curve, redrawing ({attempt + 1}/{max_attempts})")
                if attempt + 1 == max_attempts:
                    raise
    return tokens

def build_issue_request(tokens: Sequence[BlindedToken]) -> str:
    """
    Builds base64(json({"type": "Issue", "contents": [...]})) where contents are
    the base64 compressed blinded points. Blinding factors never leave the client.
    """
    contents = [encode_b64_point(t.blinded_point, compressed=True) for t in tokens]
    return b64encode(json.dumps({"type": "Issue", "contents": contents}).encode())

def wrap_issue_request(issue_request: str) -> bytes:
    return json.dumps({"bl_sig_req": issue_request}).encode()

def generate_wrapped_issue_request(
    n: int,
    curve: str = DEFAULT_CURVE,
    rng: Optional[RandomSource] = None,
    backend: Optional[CurveBackend] = None,
) -> Tuple[bytes, List[BlindedToken]]:
    tokens = mint_tokens(n, curve, rng, backend)
    return wrap_issue_request(build_issue_request(tokens)), tokens

def _read_issue_response(data, n: int, curve: str) -> Tuple[List[Point], Any]:
    response = decode_json(b64decode(data))
    if not isinstance(response, list):
        raise DecodeError("issue response is not a JSON list")

    if len(response) == n + 1:
        signatures, proof_data = response[:n], response[n]
    elif len(response) == n:
        signatures, proof_data = response, None
    else:
        raise DecodeError(f"expected {n} or {n + 1} elements in issue response, got {len(response)}")

    signed_points = [decode_b64_point(s, curve) for s in signatures]
    return signed_points, proof_data

def parse_issue_response(
    data,
    tokens: Sequence[BlindedToken],
    config: IssuerConfig,
    require_proof: bool = True,
    backend: Optional[CurveBackend] = None,
) -> List[SignedToken]:
    """
    Parses a signing response and verifies its batch proof.

    The response is base64(json([signed_point, ..., batch_proof])). A proof is
    present exactly when the list holds one element more than the tokens sent.

    Parameters:
        data (str | bytes): The raw response.
        tokens (Sequence[BlindedToken]): The tokens sent, in request order.
        config (IssuerConfig): The trusted commitments.
        require_proof (bool): Reject responses without a batch proof.
        backend (Optional[CurveBackend]): Arithmetic backend.

    Returns:
        List[SignedToken]: One signed token per token sent.

    Raises:
        DecodeError: The response could not be read.
        ProofVerificationFailure: The batch was rejected as a whole.
    """
    n = len(tokens)
    try:
        signed_points, proof_data = _read_issue_response(data, n, config.curve)
    except DecodeError as e:
        logger.info(f"discarding malformed issue response: {e}")
        raise

    try:
        if proof_data is None:
            if require_proof:
                raise ProofIncompleteError("issue response carries no batch proof")
            logger.warning(f"accepting {n} signed tokens without a batch proof")
        else:
            batch = parse_batch_proof(proof_data, config.curve)
            verify_batch_proof(
                batch,
                [t.blinded_point for t in tokens],
                signed_points,
                config,
                backend,
            )
    except DecodeError as e:
        logger.info(f"discarding malformed batch proof: {e}")
        raise
    except VerificationError as e:
        raise ProofVerificationFailure(f"unable to verify DLEQ proof: {e}") from e

    return [
        SignedToken(token=t.token, blind=t.blind, signed_point=S)
        for t, S in zip(tokens, signed_points)
    ]

def store_tokens(signed_tokens: Sequence[SignedToken]) -> List[Dict[str, str]]:
    return [t.to_storable().to_dict() for t in signed_tokens]
