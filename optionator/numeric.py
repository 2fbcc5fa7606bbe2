# optionator/numeric.py
"""
optionator.numeric
------------------

Width-bounded integer types for record fields.

Python's ``int`` is unbounded, so fields that need a fixed width declare one
of these ``int`` subclasses instead. Construction fails with ``OverflowError``
when the value does not fit, which is how both default parsing and override
conversion enforce the range.
"""


class BoundedInt(int):
    """Base class for fixed-width integers. Subclasses set ``bits`` and ``signed``."""

    bits = 64
    signed = True

    def __new__(cls, value=0):
        self = super().__new__(cls, value)
        lo, hi = cls.bounds()
        if not lo <= self <= hi:
            raise OverflowError(f"value {int(self)} out of range for {cls.__name__} [{lo}, {hi}]")
        return self

    @classmethod
    def bounds(cls):
        if cls.signed:
            return -(1 << (cls.bits - 1)), (1 << (cls.bits - 1)) - 1
        return 0, (1 << cls.bits) - 1

    def __repr__(self):
        return f"{type(self).__name__}({int(self)})"


class Int8(BoundedInt):
    bits = 8


class Int16(BoundedInt):
    bits = 16


class Int32(BoundedInt):
    bits = 32


class Int64(BoundedInt):
    bits = 64


class Uint(BoundedInt):
    bits = 64
    signed = False


class Uint8(BoundedInt):
    bits = 8
    signed = False


class Uint16(BoundedInt):
    bits = 16
    signed = False


class Uint32(BoundedInt):
    bits = 32
    signed = False


class Uint64(BoundedInt):
    bits = 64
    signed = False
