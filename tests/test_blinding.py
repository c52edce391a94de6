import pytest

from privacy_pass.backend import get_backend
from privacy_pass.blinding import blind_point, sign_point, unblind_point
from privacy_pass.curves import CURVES
from privacy_pass.errors import InvalidScalarError
from privacy_pass.hash_to_curve import derive_token_point

from conftest import CounterRandom

@pytest.fixture
def token_point(rng):
    return derive_token_point(rng.random_bytes(32))

def test_blinding_identity(token_point, rng):
    for _ in range(3):
        blinded, b = blind_point(token_point, rng)
        assert blinded != token_point
        assert unblind_point(b, blinded) == token_point

def test_blind_range(token_point, rng):
    r = CURVES["P-256"].r
    blinds = [blind_point(token_point, rng)[1] for _ in range(5)]
    assert all(0 < b < r for b in blinds)
    assert len(set(blinds)) == 5

def test_injected_rng_is_used(token_point):
    first = blind_point(token_point, CounterRandom(b"same"))
    second = blind_point(token_point, CounterRandom(b"same"))
    assert first == second

def test_unblind_signature(token_point, rng):
    # unblinding the signature over b*T yields the signature over T
    key = rng.random_scalar(CURVES["P-256"].r)
    blinded, b = blind_point(token_point, rng)
    signed = sign_point(key, blinded)
    assert unblind_point(b, signed) == sign_point(key, token_point)

@pytest.mark.parametrize("blind", [0, CURVES["P-256"].r, 2 * CURVES["P-256"].r])
def test_non_invertible_blind(token_point, blind):
    with pytest.raises(InvalidScalarError):
        unblind_point(blind, token_point)

def test_blind_with_explicit_backend(rng):
    backend = get_backend("secp256k1")
    P = derive_token_point(rng.random_bytes(32), "secp256k1")
    blinded, b = blind_point(P, rng, backend)
    assert blinded.curve == "secp256k1"
    assert unblind_point(b, blinded, backend) == P
