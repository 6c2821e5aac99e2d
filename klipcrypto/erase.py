"""Overwriting of secret material held in mutable containers."""

from __future__ import annotations

from typing import Any


def _erased(item: Any) -> Any:
    if item is None:
        return None
    if isinstance(item, bool):
        return False
    if isinstance(item, int):
        return 0
    if isinstance(item, float):
        return 0.0
    if isinstance(item, complex):
        return 0j
    erase(item)
    return item


def erase(buffer: Any) -> None:
    """Zero a mutable buffer in place.

    Accepts writable buffer-protocol objects (bytearray, array, memoryview),
    lists of numbers or of further erasable items, and objects that define
    their own ``erase`` method. Raises TypeError for anything else.
    """
    own = getattr(buffer, "erase", None)
    if callable(own):
        own()
        return
    if isinstance(buffer, list):
        buffer[:] = [_erased(item) for item in buffer]
        return
    try:
        view = memoryview(buffer)
    except TypeError:
        raise TypeError(f"cannot erase object of type {type(buffer).__name__}") from None
    with view:
        if view.readonly:
            raise TypeError(f"cannot erase read-only {type(buffer).__name__}")
        flat = view if view.ndim == 1 and view.format == "B" else view.cast("B")
        with flat:
            flat[:] = bytes(flat.nbytes)