import pytest

from privacy_pass.backend import get_backend
from privacy_pass.codec import *
from privacy_pass.config import IssuerConfig
from privacy_pass.curves import CURVES, Point, generator
from privacy_pass.errors import CurveMismatchError, DecodeError

# Commitments used by the public challenge-bypass-server test configuration
TEST_COMMITMENTS = {
    "G": "BCyENEmEdWz3Wivy7iwXFcLZ0xOW7PCe2BtoMD6sYBqUK+PBZad5euc1tP9ekcdSDxxK3ijgHsQ1PqQim4VqDGo=",
    "H": "BJj8hRLfPSe+GNfbS3Jd2XmYU3XTEJw+TaTxx7M9lxVY9BDI6toWVpmffMR0P28XJcV3W0SGWX2OOrRLaBYGhwM=",
}

@pytest.fixture(params=list(CURVES))
def points(request, rng):
    backend = get_backend(request.param)
    return [backend.base_mul(rng.random_scalar(backend.params.r)) for _ in range(4)]

@pytest.mark.parametrize("compressed", [True, False])
def test_round_trip(points, compressed):
    for P in points:
        encoded = encode_point(P, compressed)
        assert decode_point(encoded, P.curve) == P

def test_fixed_lengths(points):
    for P in points:
        assert len(encode_point(P, compressed=True)) == 33
        assert len(encode_point(P, compressed=False)) == 65

def test_generator_encoding():
    G = generator("P-256")
    assert encode_point(G, compressed=True).hex() == (
        "036b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296"
    )
    uncompressed = encode_point(G)
    assert uncompressed[0] == 0x04
    assert uncompressed[33:].hex() == (
        "4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5"
    )

def test_parity_tag_selects_root():
    G = generator("P-256")
    x = G.x.to_bytes(32, "big")
    odd = decode_point(b"\x03" + x)
    even = decode_point(b"\x02" + x)
    assert odd == G
    assert even.y == CURVES["P-256"].p - G.y

def test_untagged_rejected():
    G = generator("P-256")
    with pytest.raises(DecodeError):
        decode_point(encode_point(G)[1:])

def test_unknown_tag_rejected():
    G = generator("P-256")
    with pytest.raises(DecodeError):
        decode_point(b"\x05" + encode_point(G)[1:])
    with pytest.raises(DecodeError):
        decode_point(b"")

def test_wrong_length_rejected():
    G = generator("P-256")
    # no padding tolerance in either direction
    with pytest.raises(DecodeError):
        decode_point(encode_point(G)[:-1])
    with pytest.raises(DecodeError):
        decode_point(encode_point(G, compressed=True) + b"\x00")

def test_off_curve_rejected():
    G = generator("P-256")
    bad_y = (G.y + 1).to_bytes(32, "big")
    with pytest.raises(DecodeError):
        decode_point(b"\x04" + G.x.to_bytes(32, "big") + bad_y)

def test_point_constructor_validates():
    G = generator("P-256")
    with pytest.raises(CurveMismatchError):
        Point("P-256", G.x, G.y + 1)
    with pytest.raises(CurveMismatchError):
        Point("P-521", G.x, G.y)

def test_point_on_other_curve_rejected():
    G = generator("P-256")
    with pytest.raises(DecodeError):
        decode_point(encode_point(G), "secp256k1")

def test_commitments_config():
    config = IssuerConfig.from_dict(TEST_COMMITMENTS)
    assert config.curve == "P-256"
    assert config.to_dict() == TEST_COMMITMENTS

def test_commitments_config_incomplete():
    with pytest.raises(DecodeError):
        IssuerConfig.from_dict({"G": TEST_COMMITMENTS["G"]})
    with pytest.raises(DecodeError):
        IssuerConfig.from_json("not json")

def test_commitments_config_file(tmp_path):
    path = tmp_path / "commitments.json"
    path.write_text('{"G": "%s", "H": "%s"}' % (TEST_COMMITMENTS["G"], TEST_COMMITMENTS["H"]))
    assert IssuerConfig.from_file(path) == IssuerConfig.from_dict(TEST_COMMITMENTS)

def test_scalar_round_trip(rng):
    r = CURVES["P-256"].r
    for _ in range(5):
        k = rng.random_scalar(r)
        encoded = encode_scalar(k)
        assert len(b64decode(encoded)) == 32
        assert decode_scalar(encoded) == k

def test_scalar_fixed_width():
    short = b64encode((1).to_bytes(31, "big"))
    with pytest.raises(DecodeError):
        decode_scalar(short)

def test_scalar_canonical():
    r = CURVES["P-256"].r
    encoded = b64encode(r.to_bytes(32, "big"))
    with pytest.raises(DecodeError):
        decode_scalar(encoded)
    assert decode_scalar(encoded, canonical=False) == r

def test_invalid_base64():
    with pytest.raises(DecodeError):
        b64decode("not base64!")
    with pytest.raises(DecodeError):
        b64decode(None)
