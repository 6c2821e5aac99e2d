"""Pure-Python cryptographic primitives: constant-time helpers, block buffers, erasure, BLAKE2b and GF(2^255-19) field arithmetic."""

__version__ = "0.1.0"
__all__ = ["constant_time", "blocks", "erase", "blake2b", "field51", "field2625"]