import logging
import time
from contextlib import contextmanager
from typing import Callable, List, Optional, Tuple

from .backend import CurveBackend, get_backend
from .config import ClientSettings, IssuerConfig
from .errors import CurveMismatchError
from .issuance import build_issue_request, mint_tokens, parse_issue_response, wrap_issue_request
from .models import BlindedToken, SignedToken
from .redemption import build_redeem_header, wrap_redemption_request
from .rng import DEFAULT_RNG, RandomSource
from .store import TokenStore

logger = logging.getLogger("privacy_pass.client")

class TokenClient:
    """
    Ties issuance, verification, storage and redemption together for one issuer.

    Randomness, the clock used for timings and the curve backend are injected,
    tests pass deterministic ones.
    """

    def __init__(
        self,
        config: IssuerConfig,
        settings: Optional[ClientSettings] = None,
        rng: Optional[RandomSource] = None,
        clock: Callable[[], float] = time.perf_counter,
        backend: Optional[CurveBackend] = None,
        store: Optional[TokenStore] = None,
    ):
        self.config = config
        self.settings = settings or ClientSettings(curve=config.curve)
        if self.settings.curve != config.curve:
            raise CurveMismatchError(
                f"client mints on {self.settings.curve} but the issuer uses {config.curve}"
            )
        self.rng = rng or DEFAULT_RNG
        self.clock = clock
        self.backend = backend or get_backend(config.curve)
        self.store = store if store is not None else TokenStore()

    @contextmanager
    def _timed(self, label: str):
        start = self.clock()
        try:
            yield
        finally:
            logger.debug(f"{label}: {(self.clock() - start) * 1000:.3f} ms")

    def mint(self, n: int) -> List[BlindedToken]:
        with self._timed(f"mint {n} tokens"):
            return mint_tokens(
                n,
                self.settings.curve,
                self.rng,
                self.backend,
                self.settings.max_mint_attempts,
            )

    def issue_request(self, n: int) -> Tuple[bytes, List[BlindedToken]]:
        tokens = self.mint(n)
        with self._timed("build issue request"):
            wire = wrap_issue_request(build_issue_request(tokens))
        return wire, tokens

    def process_issue_response(self, data, tokens: List[BlindedToken]) -> List[SignedToken]:
        """Verifies a signing response and stores the resulting tokens."""
        with self._timed(f"verify {len(tokens)} signed tokens"):
            signed = parse_issue_response(
                data,
                tokens,
                self.config,
                require_proof=self.settings.require_proof,
                backend=self.backend,
            )
        self.store.add(signed)
        logger.info(f"stored {len(signed)} verified tokens, {len(self.store)} available")
        return signed

    def redeem(self, host: str, path: str) -> bytes:
        """Spends one stored token on a request to host/path."""
        token = self.store.pop()
        with self._timed("build redeem request"):
            header = build_redeem_header(token, host, path, self.backend)
            return wrap_redemption_request(header, host, path)
