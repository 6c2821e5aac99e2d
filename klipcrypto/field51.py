"""Arithmetic in GF(2^255 - 19) on five unsigned 51-bit limbs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .constant_time import Choice, conditional_select, conditional_swap, ct_eq_bytes

_LOW_51_BITS = (1 << 51) - 1
_MASK64 = (1 << 64) - 1

# 16 * p, split over the limbs, so that subtraction never underflows.
_SIXTEEN_P0 = 36_028_797_018_963_664
_SIXTEEN_PI = 36_028_797_018_963_952


def _reduce(limbs: Iterable[int]) -> tuple[int, ...]:
    l0, l1, l2, l3, l4 = limbs
    c0 = l0 >> 51
    c1 = l1 >> 51
    c2 = l2 >> 51
    c3 = l3 >> 51
    c4 = l4 >> 51
    return (
        ((l0 & _LOW_51_BITS) + c4 * 19) & _MASK64,
        (l1 & _LOW_51_BITS) + c0,
        (l2 & _LOW_51_BITS) + c1,
        (l3 & _LOW_51_BITS) + c2,
        (l4 & _LOW_51_BITS) + c3,
    )


def _carry_product(c0: int, c1: int, c2: int, c3: int, c4: int) -> tuple[int, ...]:
    c1 += (c0 >> 51) & _MASK64
    out0 = c0 & _LOW_51_BITS
    c2 += (c1 >> 51) & _MASK64
    out1 = c1 & _LOW_51_BITS
    c3 += (c2 >> 51) & _MASK64
    out2 = c2 & _LOW_51_BITS
    c4 += (c3 >> 51) & _MASK64
    out3 = c3 & _LOW_51_BITS
    carry = (c4 >> 51) & _MASK64
    out4 = c4 & _LOW_51_BITS
    out0 = (out0 + carry * 19) & _MASK64
    out1 += out0 >> 51
    out0 &= _LOW_51_BITS
    return (out0, out1, out2, out3, out4)


@dataclass(frozen=True, eq=False)
class FieldElement51:
    """An element of the field of integers modulo 2^255 - 19.

    The value is the sum of ``limbs[i] * 2**(51 * i)``; limbs may exceed 51
    bits between reductions.
    """

    limbs: tuple[int, ...]

    def __post_init__(self) -> None:
        limbs = tuple(self.limbs)
        if len(limbs) != 5:
            raise ValueError(f"expected 5 limbs, got {len(limbs)}")
        if any(not 0 <= limb <= _MASK64 for limb in limbs):
            raise ValueError("limbs must be unsigned 64-bit integers")
        object.__setattr__(self, "limbs", limbs)

    @classmethod
    def from_bytes(cls, data: bytes) -> FieldElement51:
        """Load a little-endian 32-byte encoding; the top bit is ignored."""
        data = bytes(data)
        if len(data) != 32:
            raise ValueError(f"expected 32 bytes, got {len(data)}")

        def load8(offset: int) -> int:
            return int.from_bytes(data[offset : offset + 8], "little")

        return cls(
            (
                load8(0) & _LOW_51_BITS,
                (load8(6) >> 3) & _LOW_51_BITS,
                (load8(12) >> 6) & _LOW_51_BITS,
                (load8(19) >> 1) & _LOW_51_BITS,
                (load8(24) >> 12) & _LOW_51_BITS,
            )
        )

    def to_bytes(self) -> bytes:
        """Return the canonical little-endian 32-byte encoding."""
        l0, l1, l2, l3, l4 = _reduce(self.limbs)
        q = (l0 + 19) >> 51
        q = (l1 + q) >> 51
        q = (l2 + q) >> 51
        q = (l3 + q) >> 51
        q = (l4 + q) >> 51
        l0 += 19 * q
        l1 += l0 >> 51
        l0 &= _LOW_51_BITS
        l2 += l1 >> 51
        l1 &= _LOW_51_BITS
        l3 += l2 >> 51
        l2 &= _LOW_51_BITS
        l4 += l3 >> 51
        l3 &= _LOW_51_BITS
        l4 &= _LOW_51_BITS
        value = sum(limb << (51 * i) for i, limb in enumerate((l0, l1, l2, l3, l4)))
        return value.to_bytes(32, "little")

    def __add__(self, other: FieldElement51) -> FieldElement51:
        if not isinstance(other, FieldElement51):
            return NotImplemented
        return FieldElement51(
            tuple((a + b) & _MASK64 for a, b in zip(self.limbs, other.limbs))
        )

    def __sub__(self, other: FieldElement51) -> FieldElement51:
        if not isinstance(other, FieldElement51):
            return NotImplemented
        a, b = self.limbs, other.limbs
        return FieldElement51(
            _reduce(
                (
                    (a[0] + _SIXTEEN_P0 - b[0]) & _MASK64,
                    (a[1] + _SIXTEEN_PI - b[1]) & _MASK64,
                    (a[2] + _SIXTEEN_PI - b[2]) & _MASK64,
                    (a[3] + _SIXTEEN_PI - b[3]) & _MASK64,
                    (a[4] + _SIXTEEN_PI - b[4]) & _MASK64,
                )
            )
        )

    def __mul__(self, other: FieldElement51) -> FieldElement51:
        if not isinstance(other, FieldElement51):
            return NotImplemented
        a = self.limbs
        b = other.limbs
        b1_19 = b[1] * 19
        b2_19 = b[2] * 19
        b3_19 = b[3] * 19
        b4_19 = b[4] * 19
        c0 = a[0] * b[0] + a[4] * b1_19 + a[3] * b2_19 + a[2] * b3_19 + a[1] * b4_19
        c1 = a[1] * b[0] + a[0] * b[1] + a[4] * b2_19 + a[3] * b3_19 + a[2] * b4_19
        c2 = a[2] * b[0] + a[1] * b[1] + a[0] * b[2] + a[4] * b3_19 + a[3] * b4_19
        c3 = a[3] * b[0] + a[2] * b[1] + a[1] * b[2] + a[0] * b[3] + a[4] * b4_19
        c4 = a[4] * b[0] + a[3] * b[1] + a[2] * b[2] + a[1] * b[3] + a[0] * b[4]
        return FieldElement51(_carry_product(c0, c1, c2, c3, c4))

    def __neg__(self) -> FieldElement51:
        x = self.limbs
        return FieldElement51(
            _reduce(
                (
                    (_SIXTEEN_P0 - x[0]) & _MASK64,
                    (_SIXTEEN_PI - x[1]) & _MASK64,
                    (_SIXTEEN_PI - x[2]) & _MASK64,
                    (_SIXTEEN_PI - x[3]) & _MASK64,
                    (_SIXTEEN_PI - x[4]) & _MASK64,
                )
            )
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldElement51):
            return NotImplemented
        return ct_eq_bytes(self.to_bytes(), other.to_bytes()).to_u8() == 1

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def pow2k(self, k: int) -> FieldElement51:
        """Square the element ``k`` times, giving self^(2^k)."""
        if k <= 0:
            raise ValueError(f"pow2k needs a positive exponent, got {k}")
        a = self.limbs
        for _ in range(k):
            a3_19 = 19 * a[3]
            a4_19 = 19 * a[4]
            c0 = a[0] * a[0] + 2 * (a[1] * a4_19 + a[2] * a3_19)
            c1 = a[3] * a3_19 + 2 * (a[0] * a[1] + a[2] * a4_19)
            c2 = a[1] * a[1] + 2 * (a[0] * a[2] + a[4] * a3_19)
            c3 = a[4] * a4_19 + 2 * (a[0] * a[3] + a[1] * a[2])
            c4 = a[2] * a[2] + 2 * (a[0] * a[4] + a[1] * a[3])
            a = _carry_product(c0, c1, c2, c3, c4)
        return FieldElement51(a)

    def square(self) -> FieldElement51:
        return self.pow2k(1)

    def square2(self) -> FieldElement51:
        """Return twice the square."""
        return FieldElement51(tuple((2 * limb) & _MASK64 for limb in self.pow2k(1).limbs))

    @classmethod
    def conditional_select(
        cls, a: FieldElement51, b: FieldElement51, choice: Choice
    ) -> FieldElement51:
        """Return ``a`` when choice is 0 and ``b`` when it is 1."""
        return cls(
            tuple(conditional_select(x, y, choice, 64) for x, y in zip(a.limbs, b.limbs))
        )

    @classmethod
    def conditional_swap(
        cls, a: FieldElement51, b: FieldElement51, choice: Choice
    ) -> tuple[FieldElement51, FieldElement51]:
        """Return ``(a, b)`` when choice is 0 and ``(b, a)`` when it is 1."""
        pairs = [conditional_swap(x, y, choice, 64) for x, y in zip(a.limbs, b.limbs)]
        return cls(tuple(p[0] for p in pairs)), cls(tuple(p[1] for p in pairs))


FieldElement51.ZERO = FieldElement51((0, 0, 0, 0, 0))  # type: ignore[attr-defined]
FieldElement51.ONE = FieldElement51((1, 0, 0, 0, 0))  # type: ignore[attr-defined]