"""BLAKE2b hashing with the full parameter block (keys, salts, tree mode)."""

from __future__ import annotations

import copy as _copy
import struct
from collections.abc import Sequence
from dataclasses import dataclass, field

from .constant_time import ct_eq_bytes

OUT_BYTES = 64
KEY_BYTES = 64
SALT_BYTES = 16
PERSONAL_BYTES = 16
BLOCK_BYTES = 128

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1

IV = (
    0x6A09E667F3BCC908,
    0xBB67AE8584CAA73B,
    0x3C6EF372FE94F82B,
    0xA54FF53A5F1D36F1,
    0x510E527FADE682D1,
    0x9B05688C2B3E6C1F,
    0x1F83D9ABFB41BD6B,
    0x5BE0CD19137E2179,
)

SIGMA = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
)

# Columns first, then diagonals.
_MIX = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)

_BLOCK_WORDS = struct.Struct("<16Q")
_STATE_WORDS = struct.Struct("<8Q")


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (64 - n))) & _MASK64


def _g(v: list[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    v[a] = (v[a] + v[b] + x) & _MASK64
    v[d] = _rotr(v[d] ^ v[a], 32)
    v[c] = (v[c] + v[d]) & _MASK64
    v[b] = _rotr(v[b] ^ v[c], 24)
    v[a] = (v[a] + v[b] + y) & _MASK64
    v[d] = _rotr(v[d] ^ v[a], 16)
    v[c] = (v[c] + v[d]) & _MASK64
    v[b] = _rotr(v[b] ^ v[c], 63)


def _flag_word(flag: bool) -> int:
    return _MASK64 if flag else 0


def _compress_block(
    block: bytes, words: Sequence[int], count: int, last_block: int, last_node: int
) -> list[int]:
    v = [
        *words,
        IV[0],
        IV[1],
        IV[2],
        IV[3],
        IV[4] ^ (count & _MASK64),
        IV[5] ^ (count >> 64),
        IV[6] ^ last_block,
        IV[7] ^ last_node,
    ]
    m = _BLOCK_WORDS.unpack(block)
    for s in SIGMA:
        pairs = iter(s)
        for (a, b, c, d), i, j in zip(_MIX, pairs, pairs):
            _g(v, a, b, c, d, m[i], m[j])
    return [w ^ lo ^ hi for w, lo, hi in zip(words, v[:8], v[8:])]


def compress1_loop(
    data: bytes, words: Sequence[int], count: int, last_node: bool, finalize: bool
) -> list[int]:
    """Compress ``data`` into the chaining words and return the new words.

    Without ``finalize`` the input must be a non-empty whole number of blocks.
    With it, the last (possibly partial or empty) block is zero-padded and
    flagged as final.
    """
    data = bytes(data)
    state = list(words)
    if len(state) != 8:
        raise ValueError(f"expected 8 state words, got {len(state)}")
    if not finalize and (not data or len(data) % BLOCK_BYTES):
        raise ValueError("non-final input must be a non-empty multiple of the block size")
    fin_offset = max(len(data) - 1, 0)
    fin_offset -= fin_offset % BLOCK_BYTES
    tail = data[fin_offset : fin_offset + BLOCK_BYTES]
    fin_block = tail.ljust(BLOCK_BYTES, b"\x00")
    count &= _MASK128
    for offset in range(0, fin_offset, BLOCK_BYTES):
        count = (count + BLOCK_BYTES) & _MASK128
        state = _compress_block(data[offset : offset + BLOCK_BYTES], state, count, 0, 0)
    count = (count + len(tail)) & _MASK128
    return _compress_block(
        fin_block,
        state,
        count,
        _flag_word(finalize),
        _flag_word(finalize and last_node),
    )


def _words_to_bytes(words: Sequence[int]) -> bytes:
    return _STATE_WORDS.pack(*words)


class Hash:
    """A BLAKE2b digest, compared in constant time."""

    __slots__ = ("_bytes",)

    def __init__(self, digest: bytes) -> None:
        digest = bytes(digest)
        if not 1 <= len(digest) <= OUT_BYTES:
            raise ValueError(f"Bad hash length: {len(digest)}")
        self._bytes = digest

    def as_bytes(self) -> bytes:
        return self._bytes

    def hexdigest(self) -> str:
        return self._bytes.hex()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Hash):
            return ct_eq_bytes(self._bytes, other._bytes).to_u8() == 1
        if isinstance(other, (bytes, bytearray, memoryview)):
            return ct_eq_bytes(self._bytes, bytes(other)).to_u8() == 1
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __bytes__(self) -> bytes:
        return self._bytes

    def __repr__(self) -> str:
        return f"Hash({self.hexdigest()})"


def _check_range(name: str, value: int, bits: int) -> None:
    if not 0 <= value < 1 << bits:
        raise ValueError(f"Bad {name}: {value}")


@dataclass(frozen=True, kw_only=True)
class Params:
    """The BLAKE2b parameter block."""

    hash_length: int = OUT_BYTES
    key: bytes = field(default=b"", repr=False)
    salt: bytes = b""
    personal: bytes = b""
    fanout: int = 1
    max_depth: int = 1
    max_leaf_length: int = 0
    node_offset: int = 0
    node_depth: int = 0
    inner_hash_length: int = 0
    last_node: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.hash_length <= OUT_BYTES:
            raise ValueError(f"Bad hash length: {self.hash_length}")
        object.__setattr__(self, "key", bytes(self.key))
        object.__setattr__(self, "salt", bytes(self.salt))
        object.__setattr__(self, "personal", bytes(self.personal))
        if len(self.key) > KEY_BYTES:
            raise ValueError(f"Bad key length: {len(self.key)}")
        if len(self.salt) > SALT_BYTES:
            raise ValueError(f"Bad salt length: {len(self.salt)}")
        if len(self.personal) > PERSONAL_BYTES:
            raise ValueError(f"Bad personal length: {len(self.personal)}")
        _check_range("fanout", self.fanout, 8)
        _check_range("max depth", self.max_depth, 8)
        _check_range("max leaf length", self.max_leaf_length, 32)
        _check_range("node offset", self.node_offset, 64)
        _check_range("node depth", self.node_depth, 8)
        _check_range("inner hash length", self.inner_hash_length, 8)

    @property
    def key_block(self) -> bytes:
        return self.key.ljust(BLOCK_BYTES, b"\x00")

    def to_words(self) -> list[int]:
        """Return the initial chaining words for these parameters."""
        salt_l, salt_r = struct.unpack("<2Q", self.salt.ljust(SALT_BYTES, b"\x00"))
        pers_l, pers_r = struct.unpack(
            "<2Q", self.personal.ljust(PERSONAL_BYTES, b"\x00")
        )
        return [
            IV[0]
            ^ self.hash_length
            ^ (len(self.key) << 8)
            ^ (self.fanout << 16)
            ^ (self.max_depth << 24)
            ^ (self.max_leaf_length << 32),
            IV[1] ^ self.node_offset,
            IV[2] ^ self.node_depth ^ (self.inner_hash_length << 8),
            IV[3],
            IV[4] ^ salt_l,
            IV[5] ^ salt_r,
            IV[6] ^ pers_l,
            IV[7] ^ pers_r,
        ]

    def to_state(self) -> State:
        return State(self)

    def hash(self, data: bytes) -> Hash:
        """Hash ``data`` in one call."""
        if self.key:
            return self.to_state().update(data).finalize()
        words = compress1_loop(data, self.to_words(), 0, self.last_node, True)
        return Hash(_words_to_bytes(words)[: self.hash_length])


class State:
    """Incremental BLAKE2b hashing."""

    def __init__(self, params: Params | None = None) -> None:
        params = params if params is not None else Params()
        self._words = params.to_words()
        self._count = 0
        self._buf = bytearray(BLOCK_BYTES)
        self._buf_len = 0
        self._last_node = params.last_node
        self._hash_length = params.hash_length
        self._is_keyed = bool(params.key)
        if self._is_keyed:
            self._buf[:] = params.key_block
            self._buf_len = BLOCK_BYTES

    def _fill_buf(self, data: memoryview) -> memoryview:
        take = min(BLOCK_BYTES - self._buf_len, len(data))
        self._buf[self._buf_len : self._buf_len + take] = data[:take]
        self._buf_len += take
        return data[take:]

    def update(self, data: bytes) -> State:
        """Absorb ``data`` and return the state itself."""
        view = memoryview(bytes(data))
        if self._buf_len:
            view = self._fill_buf(view)
            if len(view):
                self._words = compress1_loop(
                    bytes(self._buf), self._words, self._count, self._last_node, False
                )
                self._count = (self._count + BLOCK_BYTES) & _MASK128
                self._buf_len = 0
        end = max(len(view) - 1, 0)
        end -= end % BLOCK_BYTES
        if end:
            self._words = compress1_loop(
                bytes(view[:end]), self._words, self._count, self._last_node, False
            )
            self._count = (self._count + end) & _MASK128
            view = view[end:]
        self._fill_buf(view)
        return self

    def finalize(self) -> Hash:
        """Return the digest of everything absorbed; the state stays usable."""
        words = compress1_loop(
            bytes(self._buf[: self._buf_len]),
            self._words,
            self._count,
            self._last_node,
            True,
        )
        return Hash(_words_to_bytes(words)[: self._hash_length])

    @property
    def count(self) -> int:
        """Number of message bytes absorbed, not counting the key block."""
        total = (self._count + self._buf_len) & _MASK128
        if self._is_keyed:
            total -= BLOCK_BYTES
        return total

    def copy(self) -> State:
        return _copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"State(count={self.count}, hash_length={self._hash_length}, "
            f"last_node={self._last_node})"
        )


def blake2b(data: bytes, **kwargs: object) -> Hash:
    """Hash ``data`` with the given parameters (see :class:`Params`)."""
    return Params(**kwargs).hash(data)