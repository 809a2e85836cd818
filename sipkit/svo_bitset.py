"""A fixed-size bitset made of 64-bit words."""

from __future__ import annotations

_BITS_PER_WORD = 64
_WORD_MASK = (1 << _BITS_PER_WORD) - 1


class SVOBitset:
    """A bitset holding a whole number of 64-bit words.

    ``size`` is rounded up to a multiple of 64 bits, and every word starts
    out holding the value ``bits``.
    """

    npos = 0xFFFFFFFF

    def __init__(self, size: int = 0, bits: int = 0) -> None:
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        self._n_words = (size + _BITS_PER_WORD - 1) // _BITS_PER_WORD
        self._width = self._n_words * _BITS_PER_WORD
        self._mask = (1 << self._width) - 1
        word = bits & _WORD_MASK
        value = 0
        for _ in range(self._n_words):
            value = (value << _BITS_PER_WORD) | word
        self._value = value

    def _check(self, index: int) -> None:
        if not 0 <= index < self._width:
            raise IndexError(f"bit {index} out of range for {self._width} bits")

    def any(self) -> bool:
        """Return True if at least one bit is set."""
        return self._value != 0

    def find_first(self) -> int:
        """Return the lowest set bit, or :attr:`npos` if none is set."""
        if self._value == 0:
            return self.npos
        return (self._value & -self._value).bit_length() - 1

    def discard(self, index: int) -> None:
        """Clear one bit."""
        self._check(index)
        self._value &= ~(1 << index)

    def clear(self) -> None:
        """Clear every bit."""
        self._value = 0

    def set(self, index: int) -> None:
        """Set one bit."""
        self._check(index)
        self._value |= 1 << index

    def test(self, index: int) -> bool:
        """Return whether one bit is set."""
        self._check(index)
        return bool(self._value >> index & 1)

    def __iand__(self, other: SVOBitset) -> SVOBitset:
        self._value &= other._value
        return self

    def __ior__(self, other: SVOBitset) -> SVOBitset:
        self._value = (self._value | other._value) & self._mask
        return self

    def intersect_with_complement(self, other: SVOBitset) -> None:
        """Clear every bit that is set in ``other``."""
        self._value &= ~other._value

    def count(self) -> int:
        """Return the number of set bits."""
        return bin(self._value).count("1")

    def copy(self) -> SVOBitset:
        """Return an independent copy."""
        other = SVOBitset()
        other._n_words = self._n_words
        other._width = self._width
        other._mask = self._mask
        other._value = self._value
        return other