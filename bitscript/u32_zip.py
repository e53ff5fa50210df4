"""Interleave the bytes of two u32 stack elements."""

from .script import Opcode as Op
from .script import Script, script


def _depth(index: int) -> int:
    """Stack depth of the deepest byte of the u32 element at `index`."""
    return (index + 1) * 4 - 1


def u32_zip(a: int, b: int) -> Script:
    """Zip the u32 elements at positions `a` and `b`, consuming both.

    input:  a0 a1 a2 a3 b0 b1 b2 b3
    output: a0 b0 a1 b1 a2 b2 a3 b3
    """
    low, high = sorted((a, b))
    low, high = _depth(low), _depth(high)
    return script([low + i, Op.OP_ROLL, high, Op.OP_ROLL] for i in range(4))


def u32_copy_zip(a: int, b: int) -> Script:
    """Zip the u32 elements at `a` and `b`, keeping a copy of `a` in place.

    input:  a0 a1 a2 a3 b0 b1 b2 b3
    output: a0 b0 a1 b1 a2 b2 a3 b3 a0 a1 a2 a3
    """
    if a < b:
        return _u32_copy_zip(a, b)
    return _u32_zip_copy(b, a)


def _u32_copy_zip(a: int, b: int) -> Script:
    if not a < b:
        raise ValueError(f"expected a < b, got a={a}, b={b}")
    a, b = _depth(a), _depth(b)
    return script([a + i, Op.OP_PICK, b + 1 + i, Op.OP_ROLL] for i in range(4))


def _u32_zip_copy(a: int, b: int) -> Script:
    if not a < b:
        raise ValueError(f"expected a < b, got a={a}, b={b}")
    a, b = _depth(a), _depth(b)
    return script([a + i, Op.OP_ROLL, b, Op.OP_PICK] for i in range(4))