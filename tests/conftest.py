import hashlib
import json

import pytest

from privacy_pass.backend import get_backend
from privacy_pass.codec import (
    b64decode,
    b64encode,
    decode_b64_point,
    encode_b64_point,
    encode_scalar,
)
from privacy_pass.config import IssuerConfig
from privacy_pass.dleq import BATCH_PROOF_PREFIX, challenge, compute_composites
from privacy_pass.rng import RandomSource, SystemRandomSource

class CounterRandom(RandomSource):
    """Deterministic stand-in for the CSPRNG."""

    def __init__(self, seed: bytes = b"privacy-pass-tests"):
        self.seed = seed
        self.counter = 0

    def random_bytes(self, n: int) -> bytes:
        out = b""
        while len(out) < n:
            out += hashlib.sha256(self.seed + self.counter.to_bytes(8, "big")).digest()
            self.counter += 1
        return out[:n]

class FakeClock:

    def __init__(self):
        self.now = 0.0
        self.calls = 0

    def __call__(self):
        self.calls += 1
        self.now += 0.001
        return self.now

class SimulatedIssuer:
    """
    Minimal issuer: signs blinded points under one key and proves it with a
    batch DLEQ proof.
    """

    def __init__(self, curve="P-256", rng=None):
        self.curve = curve
        self.backend = get_backend(curve)
        self.rng = rng or SystemRandomSource()
        r = self.backend.params.r
        self.x = self.rng.random_scalar(r)
        self.G = self.backend.base_mul(self.rng.random_scalar(r))
        self.H = self.backend.mul(self.x, self.G)

    @property
    def config(self) -> IssuerConfig:
        return IssuerConfig(G=self.G, H=self.H)

    def read_issue_request(self, wire: bytes):
        request = json.loads(b64decode(json.loads(wire)["bl_sig_req"]))
        assert request["type"] == "Issue"
        return [decode_b64_point(c, self.curve) for c in request["contents"]]

    def sign(self, points, key=None):
        return [self.backend.mul(key or self.x, P) for P in points]

    def prove(self, M, Z):
        backend = self.backend
        Mc, Zc = compute_composites(self.G, self.H, M, Z, backend)
        k = self.rng.random_scalar(backend.params.r)
        A = backend.mul(k, self.G)
        B = backend.mul(k, Mc)
        C = challenge(self.G, self.H, Mc, Zc, A, B)
        R = (k - int.from_bytes(C, "big") * self.x) % backend.params.r
        dleq = {
            "G": encode_b64_point(self.G),
            "H": encode_b64_point(self.H),
            "M": encode_b64_point(Mc),
            "Z": encode_b64_point(Zc),
            "R": encode_scalar(R, self.curve),
            "C": b64encode(C),
        }
        return {
            "P": b64encode(json.dumps(dleq).encode()),
            "M": [encode_b64_point(P) for P in M],
            "Z": [encode_b64_point(P) for P in Z],
            "C": [],
        }

    @staticmethod
    def marshal_proof(batch: dict, prefix: bool = True) -> str:
        payload = json.dumps(batch).encode()
        if prefix:
            payload = BATCH_PROOF_PREFIX + payload
        return b64encode(payload)

    def respond(self, wire: bytes, with_proof: bool = True) -> str:
        M = self.read_issue_request(wire)
        Z = self.sign(M)
        elements = [encode_b64_point(P) for P in Z]
        if with_proof:
            elements.append(self.marshal_proof(self.prove(M, Z)))
        return b64encode(json.dumps(elements).encode())

@pytest.fixture
def rng():
    return CounterRandom()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def issuer():
    return SimulatedIssuer()

@pytest.fixture
def other_issuer():
    return SimulatedIssuer()
