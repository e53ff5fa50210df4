"""Right rotations of u32 values stored as four bytes."""

from .script import Opcode as Op
from .script import Script, script


def u32_rrot16() -> Script:
    """Rotate the top u32 element right by 16 bits."""
    return script(Op.OP_2SWAP)


def u32_rrot8() -> Script:
    """Rotate the top u32 element right by 8 bits."""
    return script(Op.OP_2SWAP, 3, Op.OP_ROLL)


def u8_rrot12() -> Script:
    """Split the top byte into its low nibble shifted up and its high nibble."""
    steps = [
        [
            Op.OP_DUP, 127, Op.OP_GREATERTHAN,
            Op.OP_IF,
            128, Op.OP_SUB,
            Op.OP_FROMALTSTACK, 8 >> i, Op.OP_ADD, Op.OP_TOALTSTACK,
            Op.OP_ENDIF,
            Op.OP_DUP, Op.OP_ADD,
        ]
        for i in range(4)
    ]
    return script(0, Op.OP_TOALTSTACK, steps, Op.OP_FROMALTSTACK)


def u32_rrot12() -> Script:
    """Rotate the top u32 element right by 12 bits."""
    return script(
        u8_rrot12(),
        2, Op.OP_ROLL, u8_rrot12(),
        4, Op.OP_ROLL, u8_rrot12(),
        6, Op.OP_ROLL, u8_rrot12(),
        5, Op.OP_ROLL,
        6, Op.OP_ROLL,
        Op.OP_ADD,
        Op.OP_SWAP,
        6, Op.OP_ROLL,
        Op.OP_ADD,
        Op.OP_ROT,
        3, Op.OP_ROLL,
        Op.OP_ADD,
        4, Op.OP_ROLL,
        4, Op.OP_ROLL,
        Op.OP_ADD,
    )


def u8_rrot7(i: int) -> Script:
    """Roll the byte `i` back to the top and split off its high bit."""
    return script(
        i, Op.OP_ROLL,
        Op.OP_DUP, 127, Op.OP_GREATERTHAN,
        Op.OP_IF, 128, Op.OP_SUB, 1, Op.OP_ELSE, 0, Op.OP_ENDIF,
    )


def u32_rrot7() -> Script:
    """Rotate the top u32 element right by 7 bits."""
    merge = [Op.OP_SWAP, Op.OP_DUP, Op.OP_ADD, Op.OP_ROT, Op.OP_ADD, Op.OP_SWAP]
    return script(
        u8_rrot7(0),
        u8_rrot7(2), merge,
        u8_rrot7(3), merge,
        u8_rrot7(4), merge,
        4, Op.OP_ROLL,
        Op.OP_DUP, Op.OP_ADD,
        Op.OP_ADD,
        Op.OP_SWAP,
        Op.OP_2SWAP,
        Op.OP_SWAP,
    )