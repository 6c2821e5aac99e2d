import pytest
from hypothesis import given
from hypothesis import strategies as st

from klipcrypto.blocks import BlockBuffer


def _feed(buf, chunks):
    seen = []
    for chunk in chunks:
        buf.digest_blocks(chunk, seen.extend)
    return seen


@given(
    st.sampled_from([16, 64, 128]),
    st.lists(st.binary(max_size=300), max_size=8),
)
def test_digest_blocks_emits_whole_blocks_in_order(size, chunks):
    buf = BlockBuffer(size)
    blocks = _feed(buf, chunks)
    data = b"".join(chunks)
    full = len(data) - len(data) % size
    assert all(len(block) == size for block in blocks)
    assert b"".join(blocks) == data[:full]

    padded = []
    buf.len64_padding_be(len(data) * 8, padded.append)
    tail = data[full:]
    assert padded[0][: len(tail) + 1] == tail + b"\x80"
    assert padded[-1][-8:] == (len(data) * 8).to_bytes(8, "big")
    assert len(padded) == (2 if size - len(tail) - 1 < 8 else 1)


def test_sha256_style_padding_of_abc():
    buf = BlockBuffer(64)
    blocks = _feed(buf, [b"abc"])
    assert blocks == []
    out = []
    buf.len64_padding_be(24, out.append)
    assert out == [b"abc\x80" + bytes(52) + (24).to_bytes(8, "big")]


def test_len128_padding_spills_into_second_block():
    buf = BlockBuffer(128)
    data = bytes(range(112))
    assert _feed(buf, [data]) == []
    out = []
    buf.len128_padding_be(len(data) * 8, out.append)
    assert len(out) == 2
    assert out[0] == data + b"\x80" + bytes(15)
    assert out[1] == bytes(112) + (len(data) * 8).to_bytes(16, "big")


def test_padding_resets_position():
    buf = BlockBuffer(64)
    _feed(buf, [b"hello"])
    buf.len64_padding_be(40, lambda block: None)
    out = []
    buf.len64_padding_be(0, out.append)
    assert out == [b"\x80" + bytes(63)]


def test_reset_discards_buffered_input():
    buf = BlockBuffer(64)
    _feed(buf, [b"xyz"])
    buf.reset()
    out = []
    buf.len64_padding_be(0, out.append)
    assert out[0][0] == 0x80


def test_erase_zeroes_state():
    buf = BlockBuffer(32)
    _feed(buf, [b"data"])
    buf.erase()
    out = []
    buf.len64_padding_be(0, out.append)
    assert out == [b"\x80" + bytes(31)]


def test_exact_block_is_emitted_immediately():
    buf = BlockBuffer(16)
    data = bytes(range(16))
    assert _feed(buf, [data]) == [data]


def test_invalid_block_size():
    with pytest.raises(ValueError):
        BlockBuffer(0)


def test_padding_rejects_bad_length():
    buf = BlockBuffer(64)
    with pytest.raises(ValueError):
        buf.len64_padding_be(-1, lambda block: None)
    with pytest.raises(ValueError):
        buf.len64_padding_be(1 << 64, lambda block: None)


def test_padding_rejects_tiny_block():
    buf = BlockBuffer(8)
    with pytest.raises(ValueError):
        buf.len64_padding_be(0, lambda block: None)