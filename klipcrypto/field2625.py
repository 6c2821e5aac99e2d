"""Arithmetic in GF(2^255 - 19) on ten unsigned limbs of alternating 26/25 bits."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .constant_time import Choice, conditional_select, conditional_swap, ct_eq_bytes

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1
_LOW_25_BITS = (1 << 25) - 1
_LOW_26_BITS = (1 << 26) - 1
_LOW_23_BITS = (1 << 23) - 1

# 16 * p, split over the limbs, so that subtraction never underflows.
_SIXTEEN_P = (
    0x03FF_FFED << 4,
    0x01FF_FFFF << 4,
    0x03FF_FFFF << 4,
    0x01FF_FFFF << 4,
    0x03FF_FFFF << 4,
    0x01FF_FFFF << 4,
    0x03FF_FFFF << 4,
    0x01FF_FFFF << 4,
    0x03FF_FFFF << 4,
    0x01FF_FFFF << 4,
)

# Bit position of each limb within the 255-bit value.
_OFFSETS = (0, 26, 51, 77, 102, 128, 153, 179, 204, 230)


def _carry(z: list[int], i: int) -> None:
    if i % 2 == 0:
        z[i + 1] = (z[i + 1] + (z[i] >> 26)) & _MASK64
        z[i] &= _LOW_26_BITS
    else:
        z[i + 1] = (z[i + 1] + (z[i] >> 25)) & _MASK64
        z[i] &= _LOW_25_BITS


def _reduce(coeffs: Sequence[int]) -> tuple[int, ...]:
    """Carry ten 64-bit coefficients down to limbs of 26/25 bits (plus slack)."""
    z = [c & _MASK64 for c in coeffs]
    for i in (0, 4, 1, 5, 2, 6, 3, 7, 4, 8):
        _carry(z, i)
    z[0] = (z[0] + 19 * (z[9] >> 25)) & _MASK64
    z[9] &= _LOW_25_BITS
    _carry(z, 0)
    return tuple(limb & _MASK32 for limb in z)


def _product_coefficients(x: Sequence[int], y: Sequence[int]) -> list[int]:
    """Schoolbook product with the wrap-around folded in by the factor 19.

    Terms pairing two odd limbs are doubled, since odd limbs carry one bit
    less than their position suggests.
    """
    z = [0] * 10
    for i, xi in enumerate(x):
        for j, yj in enumerate(y):
            k = i + j
            factor_x = (2 * xi) & _MASK32 if i % 2 and j % 2 else xi
            if k < 10:
                z[k] += factor_x * yj
            else:
                z[k - 10] += factor_x * ((19 * yj) & _MASK32)
    return [c & _MASK64 for c in z]


@dataclass(frozen=True, eq=False)
class FieldElement2625:
    """An element of the field of integers modulo 2^255 - 19.

    The value is the sum of ``limbs[i] * 2**offset[i]`` with offsets
    0, 26, 51, 77, ... alternating limb widths of 26 and 25 bits.
    """

    limbs: tuple[int, ...]

    def __post_init__(self) -> None:
        limbs = tuple(self.limbs)
        if len(limbs) != 10:
            raise ValueError(f"expected 10 limbs, got {len(limbs)}")
        if any(not 0 <= limb <= _MASK32 for limb in limbs):
            raise ValueError("limbs must be unsigned 32-bit integers")
        object.__setattr__(self, "limbs", limbs)

    @classmethod
    def from_bytes(cls, data: bytes) -> FieldElement2625:
        """Load a little-endian 32-byte encoding; the top bit is ignored."""
        data = bytes(data)
        if len(data) != 32:
            raise ValueError(f"expected 32 bytes, got {len(data)}")

        def load(offset: int, size: int) -> int:
            return int.from_bytes(data[offset : offset + size], "little")

        return cls(
            _reduce(
                (
                    load(0, 4),
                    load(4, 3) << 6,
                    load(7, 3) << 5,
                    load(10, 3) << 3,
                    load(13, 3) << 2,
                    load(16, 4),
                    load(20, 3) << 7,
                    load(23, 3) << 5,
                    load(26, 3) << 4,
                    (load(29, 3) & _LOW_23_BITS) << 2,
                )
            )
        )

    def to_bytes(self) -> bytes:
        """Return the canonical little-endian 32-byte encoding."""
        h = list(_reduce(self.limbs))
        q = (h[0] + 19) >> 26
        for i in range(1, 10):
            q = (h[i] + q) >> (25 if i % 2 else 26)
        h[0] += 19 * q
        for i in range(9):
            _carry(h, i)
        h[9] &= _LOW_25_BITS
        value = sum(limb << offset for limb, offset in zip(h, _OFFSETS))
        return value.to_bytes(32, "little")

    def __add__(self, other: FieldElement2625) -> FieldElement2625:
        if not isinstance(other, FieldElement2625):
            return NotImplemented
        return FieldElement2625(
            tuple((a + b) & _MASK32 for a, b in zip(self.limbs, other.limbs))
        )

    def __sub__(self, other: FieldElement2625) -> FieldElement2625:
        if not isinstance(other, FieldElement2625):
            return NotImplemented
        return FieldElement2625(
            _reduce(
                [
                    (a + bias - b) & _MASK32
                    for a, b, bias in zip(self.limbs, other.limbs, _SIXTEEN_P)
                ]
            )
        )

    def __mul__(self, other: FieldElement2625) -> FieldElement2625:
        if not isinstance(other, FieldElement2625):
            return NotImplemented
        return FieldElement2625(_reduce(_product_coefficients(self.limbs, other.limbs)))

    def __neg__(self) -> FieldElement2625:
        return FieldElement2625(
            _reduce([(bias - x) & _MASK32 for x, bias in zip(self.limbs, _SIXTEEN_P)])
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldElement2625):
            return NotImplemented
        return ct_eq_bytes(self.to_bytes(), other.to_bytes()).to_u8() == 1

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def square(self) -> FieldElement2625:
        return FieldElement2625(_reduce(_product_coefficients(self.limbs, self.limbs)))

    def square2(self) -> FieldElement2625:
        """Return twice the square."""
        coeffs = _product_coefficients(self.limbs, self.limbs)
        return FieldElement2625(_reduce([(2 * c) & _MASK64 for c in coeffs]))

    def pow2k(self, k: int) -> FieldElement2625:
        """Square the element ``k`` times, giving self^(2^k)."""
        if k <= 0:
            raise ValueError(f"pow2k needs a positive exponent, got {k}")
        z = self.square()
        for _ in range(1, k):
            z = z.square()
        return z

    @classmethod
    def conditional_select(
        cls, a: FieldElement2625, b: FieldElement2625, choice: Choice
    ) -> FieldElement2625:
        """Return ``a`` when choice is 0 and ``b`` when it is 1."""
        return cls(
            tuple(conditional_select(x, y, choice, 32) for x, y in zip(a.limbs, b.limbs))
        )

    @classmethod
    def conditional_swap(
        cls, a: FieldElement2625, b: FieldElement2625, choice: Choice
    ) -> tuple[FieldElement2625, FieldElement2625]:
        """Return ``(a, b)`` when choice is 0 and ``(b, a)`` when it is 1."""
        pairs = [conditional_swap(x, y, choice, 32) for x, y in zip(a.limbs, b.limbs)]
        return cls(tuple(p[0] for p in pairs)), cls(tuple(p[1] for p in pairs))


FieldElement2625.ZERO = FieldElement2625((0,) * 10)  # type: ignore[attr-defined]
FieldElement2625.ONE = FieldElement2625((1,) + (0,) * 9)  # type: ignore[attr-defined]