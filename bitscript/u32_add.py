"""Addition of u32 values stored as four bytes."""

from .script import Opcode as Op
from .script import Script, script
from .u32_zip import u32_copy_zip, u32_zip


def u8_add_carry() -> Script:
    """Add two bytes, leaving the byte sum and the carry bit."""
    return script(
        Op.OP_ADD, Op.OP_DUP, 255, Op.OP_GREATERTHAN,
        Op.OP_IF, 256, Op.OP_SUB, 1, Op.OP_ELSE, 0, Op.OP_ENDIF,
    )


def u8_add() -> Script:
    """Add two bytes modulo 256."""
    return script(
        Op.OP_ADD, Op.OP_DUP, 255, Op.OP_GREATERTHAN,
        Op.OP_IF, 256, Op.OP_SUB, Op.OP_ENDIF,
    )


def _add_zipped() -> Script:
    step = [u8_add_carry(), Op.OP_SWAP, Op.OP_TOALTSTACK]
    return script(
        step,
        Op.OP_ADD, step,
        Op.OP_ADD, step,
        Op.OP_ADD, u8_add(),
        [Op.OP_FROMALTSTACK] * 3,
    )


def _check_distinct(a: int, b: int) -> None:
    if a == b:
        raise ValueError(f"summand positions must differ, got {a} twice")


def u32_add(a: int, b: int) -> Script:
    """Add the u32 elements at `a` and `b`, keeping `a` and dropping `b`."""
    _check_distinct(a, b)
    return script(u32_copy_zip(a, b), _add_zipped())


def u32_add_drop(a: int, b: int) -> Script:
    """Add the u32 elements at `a` and `b`, dropping both."""
    _check_distinct(a, b)
    return script(u32_zip(a, b), _add_zipped())