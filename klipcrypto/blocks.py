"""Block buffering and Merkle-Damgard length padding for hash functions."""

from __future__ import annotations

from collections.abc import Callable, Sequence


class BlockBuffer:
    """Accumulates input and hands out whole blocks of a fixed size."""

    def __init__(self, block_size: int) -> None:
        if block_size <= 0:
            raise ValueError(f"block size must be positive, got {block_size}")
        self._size = block_size
        self._buffer = bytearray(block_size)
        self._pos = 0

    def digest_blocks(
        self, data: bytes, compress: Callable[[Sequence[bytes]], object]
    ) -> None:
        """Feed ``data``; every completed block is passed on to ``compress``."""
        data = bytes(data)
        size = self._size
        pos = self._pos
        rem = size - pos
        if len(data) < rem:
            self._buffer[pos : pos + len(data)] = data
            self._pos = pos + len(data)
            return
        if pos:
            self._buffer[pos:] = data[:rem]
            data = data[rem:]
            compress([bytes(self._buffer)])
        full = len(data) - len(data) % size
        if full:
            compress([data[start : start + size] for start in range(0, full, size)])
        tail = data[full:]
        self._buffer[: len(tail)] = tail
        self._pos = len(tail)

    def reset(self) -> None:
        """Drop any buffered input."""
        self._pos = 0

    def _pad(self, data_len: int, width: int, compress: Callable[[bytes], object]) -> None:
        size = self._size
        if size < width + 1:
            raise ValueError(
                f"block size {size} is too small for a {width * 8}-bit length suffix"
            )
        if not 0 <= data_len < 1 << (width * 8):
            raise ValueError(f"length {data_len} does not fit in {width * 8} bits")
        suffix = data_len.to_bytes(width, "big")
        pos = self._pos
        self._buffer[pos] = 0x80
        self._buffer[pos + 1 :] = bytes(size - pos - 1)
        if size - pos - 1 < width:
            compress(bytes(self._buffer))
            compress(bytes(size - width) + suffix)
        else:
            self._buffer[size - width :] = suffix
            compress(bytes(self._buffer))
        self._pos = 0

    def len64_padding_be(self, data_len: int, compress: Callable[[bytes], object]) -> None:
        """Pad with 0x80, zeros and a big-endian 64-bit length, then compress."""
        self._pad(data_len, 8, compress)

    def len128_padding_be(self, data_len: int, compress: Callable[[bytes], object]) -> None:
        """Pad with 0x80, zeros and a big-endian 128-bit length, then compress."""
        self._pad(data_len, 16, compress)

    def erase(self) -> None:
        """Zero the buffered bytes and the position."""
        self._buffer[:] = bytes(self._size)
        self._pos = 0