"""Seeded pseudo-random stream for reproducible layouts."""

MASK_32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


class SeededRandom:
    """Mulberry32 generator: a 32-bit multiply/xorshift mixer.

    Calling the instance yields the next float in ``[0, 1)``.  Two
    instances built from the same seed produce identical streams, so the
    object can be handed anywhere a ``random.random``-style callable is
    expected.
    """

    def __init__(self, seed: int = 0):
        self.seed = seed & MASK_32
        self._state = self.seed

    def __call__(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return ((t ^ (t >> 14)) & MASK_32) / 4294967296
