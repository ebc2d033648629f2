"""Fixed-size bitmaps with range set/clear and bit searching."""

from __future__ import annotations

__all__ = ["Bitmap", "BITS_PER_LONG"]

BITS_PER_LONG = 64


class Bitmap:
    """A bitmap of ``nbits`` bits, all clear initially.

    The search methods return one more than the index of the bit found
    (capped at ``nbits``), and ``nbits`` when there is none; is_full()
    relies on that result.
    """

    def __init__(self, nbits: int) -> None:
        if nbits < 0:
            raise ValueError(f"negative bitmap size: {nbits}")
        self.nbits = nbits
        self._words = -(-nbits // BITS_PER_LONG)
        self._bits = 0

    def __len__(self) -> int:
        return self.nbits

    def _range_mask(self, start: int, length: int) -> int:
        if start < 0 or length < 0 or start + length > self.nbits:
            raise IndexError(
                f"bit range {start}+{length} outside bitmap of {self.nbits} bits"
            )
        return ((1 << length) - 1) << start

    def set(self, start: int, length: int) -> None:
        """Set ``length`` bits starting at ``start``."""
        self._bits |= self._range_mask(start, length)

    def clear(self, start: int, length: int) -> None:
        """Clear ``length`` bits starting at ``start``."""
        self._bits &= ~self._range_mask(start, length)

    def test_bit(self, nr: int) -> bool:
        """Return whether bit ``nr`` is set."""
        if not 0 <= nr < self.nbits:
            raise IndexError(f"bit {nr} outside bitmap of {self.nbits} bits")
        return bool((self._bits >> nr) & 1)

    def _find_next(self, offset: int, invert: bool) -> int:
        if offset < 0:
            raise ValueError(f"negative offset: {offset}")
        if not self.nbits or offset >= self.nbits:
            return self.nbits
        value = self._bits
        if invert:
            value ^= (1 << (self._words * BITS_PER_LONG)) - 1
        value &= ~((1 << offset) - 1)
        if not value:
            return self.nbits
        return min((value & -value).bit_length(), self.nbits)

    def find_next_bit(self, offset: int) -> int:
        """Search for a set bit at or after ``offset``."""
        return self._find_next(offset, False)

    def find_next_zero_bit(self, offset: int) -> int:
        """Search for a clear bit at or after ``offset``."""
        return self._find_next(offset, True)

    def is_full(self) -> bool:
        """Return whether the zero-bit search from 0 reaches ``nbits``."""
        return self.find_next_zero_bit(0) == self.nbits