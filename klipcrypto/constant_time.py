"""Constant-time comparison and selection primitives."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


def _mask(bits: int) -> int:
    if bits <= 0:
        raise ValueError(f"bit width must be positive, got {bits}")
    return (1 << bits) - 1


@dataclass(frozen=True)
class Choice:
    """A boolean held as the integer 0 or 1, combined without branching."""

    value: int

    def __post_init__(self) -> None:
        if self.value not in (0, 1):
            raise ValueError(f"Choice must be 0 or 1, got {self.value!r}")

    def to_u8(self) -> int:
        return self.value

    def __bool__(self) -> bool:
        return self.value != 0

    def __and__(self, other: Choice) -> Choice:
        return Choice(self.value & other.value)

    def __or__(self, other: Choice) -> Choice:
        return Choice(self.value | other.value)

    def __xor__(self, other: Choice) -> Choice:
        return Choice(self.value ^ other.value)

    def __invert__(self) -> Choice:
        return Choice(1 & ~self.value)

    def ct_eq(self, other: Choice) -> Choice:
        """Return 1 when both choices hold the same value."""
        return ~(self ^ other)


@dataclass(frozen=True)
class OptionCt(Generic[T]):
    """A value paired with a Choice telling whether it is present."""

    value: T
    is_some: Choice

    def to_option(self) -> Optional[T]:
        return self.value if self.is_some.to_u8() == 1 else None


def ct_eq_int(a: int, b: int, bits: int) -> Choice:
    """Compare two integers taken as unsigned values of the given width."""
    mask = _mask(bits)
    x = (a ^ b) & mask
    y = ((x | (-x & mask)) >> (bits - 1)) & 1
    return Choice(y ^ 1)


def ct_ne_int(a: int, b: int, bits: int) -> Choice:
    """Return 1 when the two integers differ at the given width."""
    return ~ct_eq_int(a, b, bits)


def ct_eq_bytes(a: bytes, b: bytes) -> Choice:
    """Compare two byte strings; strings of different length are unequal."""
    left = bytes(a)
    right = bytes(b)
    if len(left) != len(right):
        return Choice(0)
    acc = 1
    for x, y in zip(left, right):
        acc &= ct_eq_int(x, y, 8).to_u8()
    return Choice(acc)


def conditional_select(a: int, b: int, choice: Choice, bits: int) -> int:
    """Return ``a`` when choice is 0 and ``b`` when it is 1, as unsigned values."""
    full = _mask(bits)
    a &= full
    b &= full
    mask = -choice.to_u8() & full
    return a ^ (mask & (a ^ b))


def conditional_swap(a: int, b: int, choice: Choice, bits: int) -> tuple[int, int]:
    """Return ``(a, b)`` unchanged when choice is 0, swapped when it is 1."""
    full = _mask(bits)
    a &= full
    b &= full
    mask = -choice.to_u8() & full
    t = mask & (a ^ b)
    return a ^ t, b ^ t


def conditional_select_seq(
    a: Sequence[int], b: Sequence[int], choice: Choice, bits: int
) -> list[int]:
    """Select element-wise between two sequences of equal length."""
    if len(a) != len(b):
        raise ValueError(f"sequences differ in length: {len(a)} != {len(b)}")
    return [conditional_select(x, y, choice, bits) for x, y in zip(a, b)]