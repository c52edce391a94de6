import secrets

class RandomSource:
    """
    Randomness used for token seeds and blinding factors. Implementations
    must be cryptographically secure; tests may inject deterministic ones.
    """

    def random_bytes(self, n: int) -> bytes:
        raise NotImplementedError

    def random_scalar(self, order: int) -> int:
        """Uniform in [1, order-1] via rejection sampling."""
        size = (order.bit_length() + 7) // 8
        mask = (1 << order.bit_length()) - 1
        while True:
            k = int.from_bytes(self.random_bytes(size), "big") & mask
            if 0 < k < order:
                return k

class SystemRandomSource(RandomSource):

    def random_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)

DEFAULT_RNG = SystemRandomSource()
