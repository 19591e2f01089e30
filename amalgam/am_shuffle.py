#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import random as _random
from typing import Any, List, MutableSequence, Sequence, Union

from am_errors import InvalidArgument


def shuffle(rng: _random.Random, array: MutableSequence[Any], start: int, count: int) -> None:
    """
    Uniformly permute, in place, the count elements of array beginning at
    index start. The window wraps around the end of the array.
    """
    if count <= 0:
        return
    n = len(array)
    i = count
    while i > 1:
        j = (start + rng.randrange(i)) % n
        i -= 1
        k = (start + i) % n
        array[k], array[j] = array[j], array[k]


class Shuffle:
    """
    Serve batches of elements drawn from a shuffled buffer.

    Elements are handed out in buffer order from the current position; when
    the buffer runs out the whole buffer is reshuffled and serving restarts
    at position zero. Within one pass every element is served once.
    """

    def __init__(self, rng: _random.Random, data: MutableSequence[Any]):
        if rng is None or data is None:
            raise TypeError("rng and data are required")
        self.random = rng
        self.data = data
        self.index = 0
        shuffle(self.random, self.data, 0, len(self.data))

    def get(self, dest: MutableSequence[Any], dest_start: int, count: int) -> None:
        """Write the next count elements into dest[dest_start:dest_start + count]."""
        if count < 0:
            raise InvalidArgument(count)
        if count == 0:
            return
        if dest_start < 0 or dest_start + count > len(dest):
            raise IndexError(
                f"Destination of length {len(dest)} cannot hold {count} element(s) at {dest_start}"
            )

        data = self.data
        size = len(data)
        if size == 0:
            raise IndexError("Cannot draw elements from an empty buffer")

        total = count
        start = dest_start
        index = self.index

        while total > 0:
            available = size - index
            if total <= available:
                dest[start:start + total] = data[index:index + total]
                index += total
                break

            if available > 0:
                dest[start:start + available] = data[index:size]
                start += available
                total -= available
            index = 0
            shuffle(self.random, data, 0, size)

        self.index = index

    def take(self, count: int) -> List[Any]:
        """Return the next count elements as a new list."""
        if count < 0:
            raise InvalidArgument(count)
        dest: List[Any] = [None] * count
        self.get(dest, 0, count)
        return dest


class ShuffleInts(Shuffle):
    """Shuffle over integers; built from a list or from the permutation 0..n-1."""

    def __init__(self, rng: _random.Random, data: Union[int, Sequence[int]]):
        if isinstance(data, int):
            data = list(range(data))
        else:
            data = list(data)
        super().__init__(rng, data)
