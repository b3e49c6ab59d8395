from typing import List, Sequence, TypeVar

from feed.prng import SeededRandom

T = TypeVar("T")


def seeded_shuffle(items: Sequence[T], seed: int) -> List[T]:
    """Fisher-Yates over a copy, last index to first. Returns the new list."""
    shuffled = list(items)
    rng = SeededRandom(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.next_float() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
