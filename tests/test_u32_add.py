import pytest

from bitscript.interpreter import execute_script
from bitscript.script import Opcode as Op
from bitscript.script import script
from bitscript.u32_add import u32_add, u32_add_drop, u8_add, u8_add_carry
from bitscript.u32_std import u32_push

MASK = 0xFFFFFFFF


def _ints(info):
    return [int.from_bytes(item, "little") for item in info.final_stack]


def _be(value):
    return list(value.to_bytes(4, "big"))


def test_u32_add():
    info = execute_script(script(
        u32_push(0xFFEEFFEE),
        u32_push(0xEEFFEEFF),
        u32_add_drop(1, 0),
        0xED, Op.OP_EQUALVERIFY,
        0xEE, Op.OP_EQUALVERIFY,
        0xEE, Op.OP_EQUALVERIFY,
        0xEE, Op.OP_EQUAL,
    ))
    assert info.success


@pytest.mark.parametrize("a,b", [
    (0xFFEEFFEE, 0xEEFFEEFF),
    (0xFFFFFFFF, 1),
    (0x12345678, 0x0FEDCBA9),
    (0, 0),
])
def test_add_drop_matches_modular_sum(a, b):
    info = execute_script(script(u32_push(a), u32_push(b), u32_add_drop(1, 0)))
    assert info.error is None
    assert _ints(info) == _be((a + b) & MASK)


def test_add_keeps_first_summand():
    a, b = 0x89ABCDEF, 0x76543211
    info = execute_script(script(u32_push(a), u32_push(b), u32_add(1, 0)))
    assert info.error is None
    assert _ints(info) == _be(a) + _be((a + b) & MASK)


def test_add_keeps_top_summand():
    a, b = 0x89ABCDEF, 0x76543211
    info = execute_script(script(u32_push(a), u32_push(b), u32_add(0, 1)))
    assert info.error is None
    assert _ints(info) == _be(b) + _be((a + b) & MASK)


def test_u8_add_carry():
    info = execute_script(script(200, 100, u8_add_carry()))
    assert _ints(info) == [44, 1]
    info = execute_script(script(10, 20, u8_add_carry()))
    assert _ints(info) == [30, 0]


def test_u8_add_wraps():
    info = execute_script(script(200, 100, u8_add()))
    assert _ints(info) == [44]


@pytest.mark.parametrize("func", [u32_add, u32_add_drop])
def test_same_position_rejected(func):
    with pytest.raises(ValueError):
        func(3, 3)