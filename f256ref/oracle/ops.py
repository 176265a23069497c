"""Operation codes and rounding result codes shared by the oracle and the arithmetic."""

from enum import IntEnum, unique


@unique
class RC(IntEnum):
    """Rounding witness: where a rounded value sits relative to the exact
    result it was rounded from. Same sign convention as the MPFR ternary value.
    """
    LESS = -1
    EQUAL = 0
    GREATER = 1

    @classmethod
    def from_ternary(cls, t):
        if t > 0:
            return cls.GREATER
        elif t < 0:
            return cls.LESS
        else:
            return cls.EQUAL

    def flip(self):
        """The witness of the negated value."""
        return RC(-self.value)


@unique
class OP(IntEnum):
    add = 0
    sub = 1
    mul = 2
    div = 3
    neg = 4
    sqrt = 5
    fma = 6
    fmod = 7
    remainder = 8
    trunc = 9
    acos = 10
    asin = 11
    atan = 12
    cos = 13
    sin = 14
    tan = 15
    sos = 16
    pown = 17
