import random

from typing import Callable


class SeededRandom(object):
    """
    Source of randomness for sweeps.

    Landlord only needs two operations: a bounded integer and an in-place
    shuffle expressed as a series of swaps. Any object providing intn and
    shuffle can be handed to Landlord instead, which is how tests make
    selection deterministic.
    """

    def __init__(self, seed=None):
        self._random = random.Random(seed)

    def intn(self, n: int) -> int:
        """
        Return a random integer in [0, n).

        :param n: Exclusive upper bound. Must be positive.
        :type n: int
        :return: int
        """
        if n <= 0:
            raise ValueError("invalid argument to intn: {}".format(n))
        return self._random.randrange(n)

    def shuffle(self, n: int, swap: Callable[[int, int], None]) -> None:
        """
        Pseudo-randomize the order of n elements using Fisher-Yates.

        :param n: Number of elements.
        :type n: int
        :param swap: Called with the indexes of two elements to exchange.
        :type swap: Callable[[int, int], None]
        :return: None
        """
        if n < 0:
            raise ValueError("invalid argument to shuffle: {}".format(n))
        for i in range(n - 1, 0, -1):
            j = self.intn(i + 1)
            swap(i, j)
