"""Basic stack operations on u32 values stored as four byte-sized items."""

from .pseudo import op_256mul, op_4dup
from .script import Opcode as Op
from .script import Script, script


def u32_push(value: int) -> Script:
    """Push `value` as a u32 element, most significant byte deepest."""
    return script((value >> shift) & 0xFF for shift in (24, 16, 8, 0))


def u32_equalverify() -> Script:
    """Fail unless the top two u32 elements are equal."""
    return script(
        4, Op.OP_ROLL, Op.OP_EQUALVERIFY,
        3, Op.OP_ROLL, Op.OP_EQUALVERIFY,
        Op.OP_ROT, Op.OP_EQUALVERIFY,
        Op.OP_EQUALVERIFY,
    )


def u32_equal() -> Script:
    """Leave 1 if the top two u32 elements are equal, 0 otherwise."""
    return script(
        4, Op.OP_ROLL, Op.OP_EQUAL, Op.OP_TOALTSTACK,
        3, Op.OP_ROLL, Op.OP_EQUAL, Op.OP_TOALTSTACK,
        Op.OP_ROT, Op.OP_EQUAL, Op.OP_TOALTSTACK,
        Op.OP_EQUAL,
        [Op.OP_FROMALTSTACK, Op.OP_BOOLAND] * 3,
    )


def u32_notequal() -> Script:
    """Leave 1 if the top two u32 elements differ, 0 otherwise."""
    return script(
        4, Op.OP_ROLL, Op.OP_NUMNOTEQUAL, Op.OP_TOALTSTACK,
        3, Op.OP_ROLL, Op.OP_NUMNOTEQUAL, Op.OP_TOALTSTACK,
        Op.OP_ROT, Op.OP_NUMNOTEQUAL, Op.OP_TOALTSTACK,
        Op.OP_NUMNOTEQUAL,
        [Op.OP_FROMALTSTACK, Op.OP_BOOLOR] * 3,
    )


def u32_toaltstack() -> Script:
    """Move the top u32 element to the alt stack."""
    return script([Op.OP_TOALTSTACK] * 4)


def u32_fromaltstack() -> Script:
    """Move the top u32 element of the alt stack back to the main stack."""
    return script([Op.OP_FROMALTSTACK] * 4)


def u32_dup() -> Script:
    """Duplicate the top u32 element."""
    return op_4dup()


def u32_drop() -> Script:
    """Remove the top u32 element."""
    return script(Op.OP_2DROP, Op.OP_2DROP)


def u32_roll(n: int) -> Script:
    """Move the u32 element `n` back in the stack to the top."""
    depth = (n + 1) * 4 - 1
    return script([depth, Op.OP_ROLL] * 4)


def u32_pick(n: int) -> Script:
    """Copy the u32 element `n` back in the stack to the top."""
    depth = (n + 1) * 4 - 1
    return script([depth, Op.OP_PICK] * 4)


def u32_compress() -> Script:
    """Compress the top u32 element into a single signed script number."""
    return script(
        Op.OP_SWAP, Op.OP_ROT,
        3, Op.OP_ROLL,
        Op.OP_DUP, 127, Op.OP_GREATERTHAN,
        Op.OP_IF, 128, Op.OP_SUB, 1, Op.OP_ELSE, 0, Op.OP_ENDIF,
        Op.OP_TOALTSTACK,
        [op_256mul(), Op.OP_ADD] * 3,
        Op.OP_FROMALTSTACK,
        Op.OP_IF, Op.OP_NEGATE, Op.OP_ENDIF,
    )