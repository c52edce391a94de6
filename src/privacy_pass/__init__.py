from .backend import CurveBackend, EcdsaBackend, get_backend
from .blinding import blind_point, sign_point, unblind_point
from .client import TokenClient
from .codec import decode_point, decode_scalar, encode_point, encode_scalar
from .config import ClientSettings, IssuerConfig
from .curves import CURVES, DEFAULT_CURVE, Point, generator
from .dleq import BatchProof, DLEQProof, check_batch_proof, verify_batch_proof
from .errors import *
from .hash_to_curve import derive_token_point
from .issuance import build_issue_request, mint_tokens, parse_issue_response
from .models import BlindedToken, SignedToken, StorableToken, Token
from .redemption import (
    build_redeem_header,
    check_request_binding,
    create_request_binding,
    derive_key,
)
from .rng import RandomSource, SystemRandomSource
from .store import TokenStore
