import json
import logging
import threading
from typing import Iterable, List, Optional

from .codec import decode_json
from .errors import DecodeError
from .models import SignedToken, StorableToken

logger = logging.getLogger("privacy_pass.store")

class TokenStore:
    """
    In-memory store of verified tokens. Each token is handed out at most once.
    """

    def __init__(self, tokens: Optional[Iterable[StorableToken]] = None):
        self._lock = threading.Lock()
        self._tokens: List[StorableToken] = list(tokens or [])

    def __len__(self):
        with self._lock:
            return len(self._tokens)

    def add(self, signed_tokens: Iterable[SignedToken]):
        storable = [t.to_storable() for t in signed_tokens]
        with self._lock:
            self._tokens.extend(storable)
        logger.debug(f"stored {len(storable)} tokens")

    def pop(self) -> SignedToken:
        """Removes and returns the oldest token. Raises IndexError when empty."""
        with self._lock:
            if not self._tokens:
                raise IndexError("no tokens left to spend")
            storable = self._tokens.pop(0)
        return storable.to_signed_token()

    def dumps(self) -> str:
        with self._lock:
            return json.dumps([t.to_dict() for t in self._tokens])

    @classmethod
    def loads(cls, data):
        items = decode_json(data)
        if not isinstance(items, list):
            raise DecodeError("token store dump is not a JSON list")
        return cls(StorableToken.from_dict(item) for item in items)
