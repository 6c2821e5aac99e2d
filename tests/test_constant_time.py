import pytest
from hypothesis import given
from hypothesis import strategies as st

from klipcrypto.constant_time import (
    Choice,
    OptionCt,
    conditional_select,
    conditional_select_seq,
    conditional_swap,
    ct_eq_bytes,
    ct_eq_int,
    ct_ne_int,
)

bits_values = st.sampled_from([8, 16, 32, 64, 128])


@pytest.mark.parametrize("a", [0, 1])
@pytest.mark.parametrize("b", [0, 1])
def test_choice_operators_truth_table(a, b):
    ca, cb = Choice(a), Choice(b)
    assert (ca & cb).to_u8() == (a and b)
    assert (ca | cb).to_u8() == (a or b)
    assert (ca ^ cb).to_u8() == (a != b)
    assert (~ca).to_u8() == (not a)
    assert ca.ct_eq(cb).to_u8() == (a == b)


@pytest.mark.parametrize("value, expected", [(1, True), (0, False)])
def test_choice_bool(value, expected):
    result = bool(Choice(value))
    assert result == expected
    inverted = bool(~Choice(value))
    assert inverted == (not expected)


@pytest.mark.parametrize("bad", [2, -1, 255])
def test_choice_rejects_other_values(bad):
    with pytest.raises(ValueError):
        Choice(bad)


def test_option_ct():
    assert OptionCt(7, Choice(1)).to_option() == 7
    assert OptionCt(7, Choice(0)).to_option() is None


@given(st.integers(min_value=0), st.integers(min_value=0), bits_values)
def test_ct_eq_int_matches_equality(a, b, bits):
    mask = (1 << bits) - 1
    expected = (a & mask) == (b & mask)
    assert bool(ct_eq_int(a, b, bits)) is expected
    assert bool(ct_ne_int(a, b, bits)) is (not expected)


@given(st.integers(min_value=0, max_value=255))
def test_ct_eq_int_reflexive(a):
    assert ct_eq_int(a, a, 8).to_u8() == 1


def test_ct_eq_int_signed_cast():
    assert ct_eq_int(-1, 255, 8).to_u8() == 1
    assert ct_eq_int(-1, 255, 16).to_u8() == 0


def test_ct_eq_int_bad_width():
    with pytest.raises(ValueError):
        ct_eq_int(1, 1, 0)


@given(st.binary(), st.binary())
def test_ct_eq_bytes(a, b):
    assert bool(ct_eq_bytes(a, b)) is (a == b)
    assert ct_eq_bytes(a, a).to_u8() == 1


def test_ct_eq_bytes_length_mismatch():
    assert ct_eq_bytes(b"abc", b"abcd").to_u8() == 0
    assert ct_eq_bytes(bytearray(b"xy"), b"xy").to_u8() == 1


@given(st.integers(min_value=0, max_value=2**64 - 1), st.integers(min_value=0, max_value=2**64 - 1))
def test_conditional_select(a, b):
    assert conditional_select(a, b, Choice(0), 64) == a
    assert conditional_select(a, b, Choice(1), 64) == b


@given(st.integers(min_value=0, max_value=2**32 - 1), st.integers(min_value=0, max_value=2**32 - 1))
def test_conditional_swap(a, b):
    assert conditional_swap(a, b, Choice(0), 32) == (a, b)
    assert conditional_swap(a, b, Choice(1), 32) == (b, a)


def test_conditional_select_masks_negative():
    assert conditional_select(-1, 0, Choice(0), 8) == 255


def test_conditional_select_seq():
    a = [1, 2, 3]
    b = [4, 5, 6]
    assert conditional_select_seq(a, b, Choice(0), 8) == a
    assert conditional_select_seq(a, b, Choice(1), 8) == b


def test_conditional_select_seq_length_mismatch():
    with pytest.raises(ValueError):
        conditional_select_seq([1, 2], [1], Choice(1), 8)