"""
Lehmer / Park-Miller generator.

The stream for a given seed is identical on every platform, so a feed can
be replayed from its seed alone.
"""

MODULUS = 2**31 - 1
MULTIPLIER = 48271


class SeededRandom:
    def __init__(self, seed: int):
        state = int(seed) % MODULUS
        if state <= 0:
            state += MODULUS - 1
        self._state = state

    @property
    def state(self) -> int:
        return self._state

    def next_int(self) -> int:
        self._state = (self._state * MULTIPLIER) % MODULUS
        return self._state

    def next_float(self) -> float:
        # state is in [1, MODULUS - 1], so this lands in [0, 1)
        return (self.next_int() - 1) / (MODULUS - 1)


def create(seed: int) -> SeededRandom:
    return SeededRandom(seed)
