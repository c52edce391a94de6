import hashlib
import hmac
import json
from typing import Iterable, Optional, Tuple

from .backend import CurveBackend
from .blinding import unblind_point
from .codec import b64decode, b64encode, decode_json, encode_point
from .curves import Point
from .errors import DecodeError
from .models import SignedToken

# the exact bytes of "hash_derive_key"
DERIVE_KEY_TAG = bytes.fromhex("686173685f6465726976655f6b6579")
# the exact bytes of "hash_request_binding"
REQUEST_BINDING_TAG = bytes.fromhex("686173685f726571756573745f62696e64696e67")

def derive_key(shared_point: Point, preimage: bytes) -> bytes:
    """
    Derives the shared redemption key.

    Parameters:
        shared_point (Point): The unblinded signed point.
        preimage (bytes): The token preimage.

    Returns:
        bytes: HMAC-SHA256 keyed by the derive-key tag over enc(point) || preimage.
    """
    h = hmac.new(DERIVE_KEY_TAG, digestmod=hashlib.sha256)
    h.update(encode_point(shared_point))
    h.update(preimage)
    return h.digest()

def create_request_binding(key: bytes, data: Iterable[bytes]) -> bytes:
    """
    MACs request data under a derived key. Item order is part of the MAC.
    """
    h = hmac.new(key, digestmod=hashlib.sha256)
    h.update(REQUEST_BINDING_TAG)
    for item in data:
        h.update(item)
    return h.digest()

def check_request_binding(key: bytes, data: Iterable[bytes], mac: bytes) -> bool:
    observed = create_request_binding(key, data)
    return hmac.compare_digest(observed, mac)

def build_redeem_header(
    token: SignedToken,
    host: str,
    path: str,
    backend: Optional[CurveBackend] = None,
) -> str:
    """
    Builds base64(json({"type": "Redeem", "contents": [preimage, binding]})).

    The binding is an HMAC over host and path keyed by a key derived from the
    unblinded signature, so only the holder of the blind can produce it.
    """
    shared_point = unblind_point(token.blind, token.signed_point, backend)
    key = derive_key(shared_point, token.token.preimage)
    binding = create_request_binding(key, [host.encode("utf-8"), path.encode("utf-8")])

    contents = [b64encode(token.token.preimage), b64encode(binding)]
    return b64encode(json.dumps({"type": "Redeem", "contents": contents}).encode())

def parse_redeem_header(header) -> Tuple[bytes, bytes]:
    """Returns (preimage, binding) from a redemption header."""
    request = decode_json(b64decode(header))
    if not isinstance(request, dict) or request.get("type") != "Redeem":
        raise DecodeError("not a Redeem request")
    contents = request.get("contents")
    if not isinstance(contents, list) or len(contents) != 2:
        raise DecodeError("Redeem request must carry a preimage and a binding")
    preimage, binding = (b64decode(c) for c in contents)
    return preimage, binding

def wrap_redemption_request(header: str, host: str, path: str) -> bytes:
    return json.dumps({"bl_sig_req": header, "host": host, "http": path}).encode()
