"""Bitwise XOR of bytes and u32 values using a lookup table on the stack."""

from .script import Opcode as Op
from .script import Script, script
from .u32_zip import u32_copy_zip

# Highest entry of each 16-item block of the table, in push order.
_XOR_TABLE_BLOCKS = (85, 85, 69, 69, 85, 85, 69, 69, 21, 21, 5, 5, 21, 21, 5, 5)


def u8_xor(i: int) -> Script:
    """XOR the top two bytes; the lookup table begins `i` items below them."""
    return script(
        # f_A = f(A)
        Op.OP_DUP, i, Op.OP_ADD, Op.OP_PICK,
        # A_even = f_A << 1
        Op.OP_DUP, Op.OP_DUP, Op.OP_ADD,
        # A_odd = A - A_even
        Op.OP_ROT, Op.OP_SWAP, Op.OP_SUB,
        # f_B = f(B)
        Op.OP_ROT, Op.OP_DUP, i + 1, Op.OP_ADD, Op.OP_PICK,
        # B_even = f_B << 1
        Op.OP_DUP, Op.OP_DUP, Op.OP_ADD,
        # B_odd = B - B_even
        Op.OP_ROT, Op.OP_SWAP, Op.OP_SUB,
        # A_andxor_B_even = f_A + f_B
        Op.OP_SWAP, 3, Op.OP_ROLL, Op.OP_ADD,
        # A_xor_B_even = A_andxor_B_even - (f(A_andxor_B_even) << 1)
        Op.OP_DUP, i + 1, Op.OP_ADD, Op.OP_PICK, Op.OP_DUP, Op.OP_ADD, Op.OP_SUB,
        # A_andxor_B_odd = A_odd + B_odd
        Op.OP_SWAP, Op.OP_ROT, Op.OP_ADD,
        # A_xor_B_odd = A_andxor_B_odd - (f(A_andxor_B_odd) << 1)
        Op.OP_DUP, i, Op.OP_ADD, Op.OP_PICK, Op.OP_DUP, Op.OP_ADD, Op.OP_SUB,
        # A_xor_B = A_xor_B_odd + (A_xor_B_even << 1)
        Op.OP_SWAP, Op.OP_DUP, Op.OP_ADD, Op.OP_ADD,
    )


def u32_xor(a: int, b: int, stack_size: int) -> Script:
    """XOR the u32 elements at `a` and `b`, keeping `a` and dropping `b`.

    `stack_size` is one more than the number of u32 elements above the table.
    """
    if a == b:
        raise ValueError(f"operand positions must differ, got {a} twice")
    if stack_size < 2:
        raise ValueError(f"stack_size must be at least 2, got {stack_size}")
    base = (stack_size - 2) * 4
    return script(
        u32_copy_zip(a, b),
        u8_xor(8 + base), Op.OP_TOALTSTACK,
        u8_xor(6 + base), Op.OP_TOALTSTACK,
        u8_xor(4 + base), Op.OP_TOALTSTACK,
        u8_xor(2 + base),
        [Op.OP_FROMALTSTACK] * 3,
    )


def _xor_table_block(high: int) -> list:
    return [
        high, Op.OP_DUP, high - 1, Op.OP_DUP, Op.OP_2OVER, Op.OP_2OVER,
        high - 4, Op.OP_DUP, high - 5, Op.OP_DUP, Op.OP_2OVER, Op.OP_2OVER,
    ]


def u8_push_xor_table() -> Script:
    """Push the lookup table for f(x) = (x & 0b10101010) >> 1, f(0) on top."""
    return script(_xor_table_block(high) for high in _XOR_TABLE_BLOCKS)


def u8_drop_xor_table() -> Script:
    """Drop the lookup table."""
    return script([Op.OP_2DROP] * 128)