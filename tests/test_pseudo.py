from bitscript.interpreter import execute_script
from bitscript.pseudo import (
    op_2k_mul,
    op_2mul,
    op_4drop,
    op_4dup,
    op_4fromaltstack,
    op_4mul,
    op_4pick,
    op_4roll,
    op_4swap,
    op_4toaltstack,
    op_16mul,
    op_256mul,
    op_checksequenceverify,
)
from bitscript.script import Opcode, script

ITEMS = [21, 22, 23, 24, 25, 26, 27, 28]


def _stack(*parts):
    result = execute_script(script(*parts))
    assert result.error is None
    return list(result.final_stack)


def test_power_multiplications_match_repeated_doubling():
    assert op_4mul() == op_2k_mul(2)
    assert op_16mul() == op_2k_mul(4)
    assert op_256mul() == op_2k_mul(8)
    assert op_2k_mul(1) == op_2mul()
    assert len(op_2k_mul(0)) == 0


def test_2mul_doubles():
    result = execute_script(script(37, op_2mul(), 37, 37, Opcode.OP_ADD, Opcode.OP_EQUAL))
    assert result.success


def test_4dup_copies_top_four():
    stack = _stack(ITEMS[:4], op_4dup())
    assert stack[:4] == stack[4:]
    assert len(stack) == 8


def test_4drop_removes_four():
    assert _stack(ITEMS[:6], op_4drop()) == _stack(ITEMS[:2])


def test_4swap_twice_is_identity():
    assert _stack(ITEMS, op_4swap(), op_4swap()) == _stack(ITEMS)


def test_4swap_exchanges_groups():
    original = _stack(ITEMS)
    assert _stack(ITEMS, op_4swap()) == original[4:] + original[:4]


def test_altstack_round_trip():
    assert _stack(ITEMS[:5], op_4toaltstack(), op_4fromaltstack()) == _stack(ITEMS[:5])
    assert _stack(ITEMS[:5], op_4toaltstack()) == _stack(ITEMS[:1])


def test_4roll_preserves_items():
    original = _stack(ITEMS[:6])
    rolled = _stack(ITEMS[:6], 1, op_4roll())
    assert len(rolled) == 6
    assert sorted(rolled) == sorted(original)
    assert rolled[0] == original[0]


def test_4pick_adds_four_and_keeps_originals():
    original = _stack(ITEMS[:6])
    picked = _stack(ITEMS[:6], 1, 1, op_4pick())
    assert len(picked) == 10
    assert picked[:6] == original
    assert set(picked[6:]) <= set(original)


def test_checksequenceverify_opcode():
    assert op_checksequenceverify() == script(Opcode.OP_CHECKSEQUENCEVERIFY)