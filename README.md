# klipcrypto

Small, dependency-free cryptographic building blocks in pure Python.

## Modules

- `klipcrypto.constant_time`
  - `Choice`: a boolean held as 0 or 1, combined with `&`, `|`, `^` and `~`;
    `to_u8()`, `bool()` and `ct_eq()`.
  - `OptionCt`: a value paired with a `Choice`; `to_option()` gives the value
    or `None`.
  - `ct_eq_int(a, b, bits)` and `ct_ne_int(a, b, bits)` compare integers as
    unsigned values of the given width.
  - `ct_eq_bytes(a, b)` compares byte strings; different lengths are unequal.
  - `conditional_select(a, b, choice, bits)`, `conditional_swap(a, b, choice, bits)`
    and `conditional_select_seq(a, b, choice, bits)` pick between values by a
    `Choice` without branching on it.
- `klipcrypto.blocks`
  - `BlockBuffer(block_size)` accumulates streaming input. `digest_blocks(data, compress)`
    calls `compress` with a list of completed blocks; `len64_padding_be` and
    `len128_padding_be` append 0x80, zeros and a big-endian length and call
    `compress` once per final block. `reset()` drops buffered input and
    `erase()` zeroes it.
- `klipcrypto.erase`
  - `erase(buffer)` zeroes a writable buffer (`bytearray`, `array`,
    `memoryview`), a list of numbers or nested erasable items, or any object
    with its own `erase()` method. Anything else raises `TypeError`.
- `klipcrypto.blake2b`
  - `blake2b(data, **params)` hashes in one call.
  - `Params` holds the parameter block: `hash_length` (1–64), `key` (up to 64
    bytes), `salt` and `personal` (up to 16 bytes), `fanout`, `max_depth`,
    `max_leaf_length`, `node_offset`, `node_depth`, `inner_hash_length` and
    `last_node`. Out-of-range values raise `ValueError`. `to_words()`,
    `to_state()` and `hash(data)` are provided.
  - `State` hashes incrementally: `update(data)` returns the state,
    `finalize()` leaves it usable, `count` is the number of message bytes
    absorbed, `copy()` duplicates it.
  - `Hash` is the digest: `as_bytes()`, `hexdigest()`, `len()`, `bytes()`,
    and equality against another `Hash` or bytes, compared in constant time.
  - `compress1_loop(data, words, count, last_node, finalize)` is the
    compression function over whole blocks.
- `klipcrypto.field51` and `klipcrypto.field2625`
  - `FieldElement51` (five 51-bit limbs) and `FieldElement2625` (ten limbs of
    alternating 26 and 25 bits) implement arithmetic modulo 2^255 - 19:
    `from_bytes`, `to_bytes` (canonical 32-byte little-endian encoding), `+`,
    `-`, `*`, unary `-`, `==`, `square()`, `square2()` (twice the square),
    `pow2k(k)`, and the class methods `conditional_select` and
    `conditional_swap`. Each class has `ZERO` and `ONE`.

Python integers carry no timing guarantees, so the constant-time helpers
describe how values are combined, not a hardened side-channel defence.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

```python
from klipcrypto.blake2b import blake2b, Params

digest = blake2b(b"hello", hash_length=32, key=b"secret")
print(digest.hexdigest())

state = Params(hash_length=64).to_state()
state.update(b"hel").update(b"lo")
assert state.finalize() == Params(hash_length=64).hash(b"hello")
```

```python
from klipcrypto.constant_time import ct_eq_bytes

assert bool(ct_eq_bytes(b"abc", b"abc"))
```

```python
from klipcrypto.field51 import FieldElement51

x = FieldElement51.from_bytes(bytes([9]) + bytes(31))
y = x.square() * x
print(y.to_bytes().hex())
```

## What it does not do

The package stops at field arithmetic: it has no curve points, scalars,
signatures or key exchange, no key derivation or stream cipher, and no
command-line tool.