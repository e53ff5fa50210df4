"""Composite operations built from basic opcodes."""

from .script import Opcode as Op
from .script import Script, script


def op_checksequenceverify() -> Script:
    return script(Op.OP_CSV)


def op_4pick() -> Script:
    """The 4 items n back in the stack are copied to the top."""
    return script(
        Op.OP_ADD,
        Op.OP_DUP, Op.OP_PICK, Op.OP_SWAP,
        Op.OP_DUP, Op.OP_PICK, Op.OP_SWAP,
        Op.OP_DUP, Op.OP_PICK, Op.OP_SWAP,
        Op.OP_1SUB, Op.OP_PICK,
    )


def op_4roll() -> Script:
    """The 4 items n back in the stack are moved to the top."""
    return script(
        4, Op.OP_ADD,
        Op.OP_DUP, Op.OP_ROLL, Op.OP_SWAP,
        Op.OP_DUP, Op.OP_ROLL, Op.OP_SWAP,
        Op.OP_DUP, Op.OP_ROLL, Op.OP_SWAP,
        Op.OP_1SUB, Op.OP_ROLL,
    )


def op_4dup() -> Script:
    """Duplicate the top 4 items."""
    return script(Op.OP_2OVER, Op.OP_2OVER)


def op_4drop() -> Script:
    """Drop the top 4 items."""
    return script(Op.OP_2DROP, Op.OP_2DROP)


def op_4swap() -> Script:
    """Swap the top two groups of 4 items."""
    return script([7, Op.OP_ROLL] * 4)


def op_4toaltstack() -> Script:
    """Move the top 4 items to the alt stack."""
    return script([Op.OP_TOALTSTACK] * 4)


def op_4fromaltstack() -> Script:
    """Move the top 4 alt stack items back to the main stack."""
    return script([Op.OP_FROMALTSTACK] * 4)


def op_2mul() -> Script:
    """Multiply the top item by 2."""
    return script(Op.OP_DUP, Op.OP_ADD)


def op_4mul() -> Script:
    """Multiply the top item by 4."""
    return script([Op.OP_DUP, Op.OP_ADD] * 2)


def op_2k_mul(k: int) -> Script:
    """Multiply the top item by 2**k."""
    return script(op_2mul() for _ in range(k))


def op_16mul() -> Script:
    """Multiply the top item by 16."""
    return script([Op.OP_DUP, Op.OP_ADD] * 4)


def op_256mul() -> Script:
    """Multiply the top item by 256."""
    return script([Op.OP_DUP, Op.OP_ADD] * 8)