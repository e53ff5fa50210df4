import pytest

from bitscript.interpreter import execute_script
from bitscript.script import script
from bitscript.u32_std import u32_drop, u32_fromaltstack, u32_push, u32_toaltstack
from bitscript.u32_xor import u32_xor, u8_drop_xor_table, u8_push_xor_table, u8_xor


def _ints(info):
    return [int.from_bytes(item, "little") for item in info.final_stack]


def _be(value):
    return list(value.to_bytes(4, "big"))


def test_xor_table_contents():
    info = execute_script(u8_push_xor_table())
    values = _ints(info)
    assert len(values) == 256
    top_first = values[::-1]
    assert top_first[0] == 0
    assert top_first[255] == 85
    assert all(top_first[x] == (x & 0b10101010) >> 1 for x in range(256))


def test_xor_table_push_and_drop_leaves_empty_stack():
    info = execute_script(script(u8_push_xor_table(), u8_drop_xor_table()))
    assert info.error is None
    assert len(info.final_stack) == 0


@pytest.mark.parametrize("a,b", [
    (0x12345678, 0xFFFFFFFF),
    (0, 0xDEADBEEF),
    (0xA5A5A5A5, 0x5A5A5A5A),
    (0x6A09E667, 0x6A09E667),
])
def test_u32_xor_top_element_kept(a, b):
    info = execute_script(script(
        u8_push_xor_table(), u32_push(a), u32_push(b),
        u32_xor(0, 1, 3),
        u32_toaltstack(), u32_drop(), u8_drop_xor_table(), u32_fromaltstack(),
    ))
    assert info.error is None
    assert _ints(info) == _be(a ^ b)


def test_u32_xor_keeps_first_operand():
    a, b = 0x0F0F1234, 0xF0F0ABCD
    info = execute_script(script(
        u8_push_xor_table(), u32_push(a), u32_push(b),
        u32_xor(1, 0, 3),
        u32_toaltstack(), u32_toaltstack(), u8_drop_xor_table(),
        u32_fromaltstack(), u32_fromaltstack(),
    ))
    assert info.error is None
    assert _ints(info) == _be(a) + _be(a ^ b)


@pytest.mark.parametrize("x,y", [(0, 0), (0xFF, 0x0F), (0xAA, 0x55), (0x3C, 0xC3)])
def test_u8_xor(x, y):
    info = execute_script(script(u8_push_xor_table(), x, y, u8_xor(2)))
    values = _ints(info)
    assert len(values) == 257
    assert values[-1] == x ^ y


def test_u32_xor_rejects_same_operand():
    with pytest.raises(ValueError):
        u32_xor(1, 1, 3)


def test_u32_xor_rejects_small_stack_size():
    with pytest.raises(ValueError):
        u32_xor(0, 1, 1)