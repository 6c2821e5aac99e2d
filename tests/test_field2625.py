import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from klipcrypto.constant_time import Choice
from klipcrypto.field2625 import FieldElement2625
from klipcrypto.field51 import FieldElement51

P = 2**255 - 19


def enc(n: int) -> bytes:
    return n.to_bytes(32, "little")


def fe(n: int) -> FieldElement2625:
    return FieldElement2625.from_bytes(enc(n))


def value(x: FieldElement2625) -> int:
    return int.from_bytes(x.to_bytes(), "little")


canonical = st.integers(min_value=0, max_value=P - 1)
raw32 = st.binary(min_size=32, max_size=32)


def test_one_and_zero_encodings():
    assert FieldElement2625.ONE.to_bytes() == b"\x01" + bytes(31)
    assert FieldElement2625.ZERO.to_bytes() == bytes(32)


def test_modulus_encodes_to_zero():
    p_bytes = bytes([0xED]) + b"\xff" * 30 + bytes([0x7F])
    assert FieldElement2625.from_bytes(p_bytes).to_bytes() == bytes(32)


def test_negative_one_is_p_minus_one():
    minus_one = -fe(1)
    assert minus_one.to_bytes() == bytes([0xEC]) + b"\xff" * 30 + bytes([0x7F])


def test_non_canonical_input_is_reduced():
    assert fe(P + 5) == fe(5)
    assert fe(P + 5).to_bytes() == enc(5)


def test_top_bit_ignored():
    data = bytearray(enc(12345))
    data[31] |= 0x80
    assert FieldElement2625.from_bytes(bytes(data)) == fe(12345)


@given(canonical)
def test_round_trip(n):
    assert fe(n).to_bytes() == enc(n)


@given(raw32)
def test_agrees_with_51_bit_representation(data):
    assert FieldElement2625.from_bytes(data).to_bytes() == FieldElement51.from_bytes(
        data
    ).to_bytes()


@settings(max_examples=50)
@given(raw32, raw32)
def test_operations_agree_with_51_bit_representation(a, b):
    x, y = FieldElement2625.from_bytes(a), FieldElement2625.from_bytes(b)
    u, v = FieldElement51.from_bytes(a), FieldElement51.from_bytes(b)
    assert (x + y).to_bytes() == (u + v).to_bytes()
    assert (x - y).to_bytes() == (u - v).to_bytes()
    assert (x * y).to_bytes() == (u * v).to_bytes()
    assert (-x).to_bytes() == (-u).to_bytes()
    assert x.square2().to_bytes() == u.square2().to_bytes()


@settings(max_examples=50)
@given(canonical, canonical)
def test_arithmetic_modulo_p(a, b):
    x, y = fe(a), fe(b)
    assert value(x + y) == (a + b) % P
    assert value(x - y) == (a - b) % P
    assert value(x * y) == (a * b) % P
    assert value(-x) == (-a) % P


@given(canonical)
def test_square_matches_mul(n):
    x = fe(n)
    assert x.square() == x * x
    assert x.square2() == x * x + x * x


@given(canonical, st.integers(min_value=1, max_value=6))
def test_pow2k_is_repeated_squaring(n, k):
    x = fe(n)
    expected = x
    for _ in range(k):
        expected = expected.square()
    assert x.pow2k(k) == expected


@given(canonical)
def test_add_negation_is_zero(n):
    x = fe(n)
    assert x + (-x) == FieldElement2625.ZERO
    assert x - x == FieldElement2625.ZERO


@given(canonical)
def test_one_is_multiplicative_identity(n):
    x = fe(n)
    assert x * FieldElement2625.ONE == x


def test_conditional_select_and_swap():
    a, b = fe(7), fe(11)
    assert FieldElement2625.conditional_select(a, b, Choice(0)) == a
    assert FieldElement2625.conditional_select(a, b, Choice(1)) == b
    assert FieldElement2625.conditional_swap(a, b, Choice(0)) == (a, b)
    assert FieldElement2625.conditional_swap(a, b, Choice(1)) == (b, a)


def test_from_bytes_wrong_length():
    with pytest.raises(ValueError):
        FieldElement2625.from_bytes(bytes(31))


def test_wrong_limb_count():
    with pytest.raises(ValueError):
        FieldElement2625((0,) * 9)


def test_limb_out_of_range():
    with pytest.raises(ValueError):
        FieldElement2625((1 << 32,) + (0,) * 9)


def test_pow2k_requires_positive_exponent():
    with pytest.raises(ValueError):
        FieldElement2625.ONE.pow2k(0)


def test_equal_elements_hash_equal():
    assert hash(fe(P + 3)) == hash(fe(3))