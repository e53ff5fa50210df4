import pytest

from bitscript.script import Opcode, Script, push_bytes, push_number, script


def test_opcode_emits_single_byte():
    assert bytes(script(Opcode.OP_ADD)) == bytes([Opcode.OP_ADD.value])


def test_small_numbers_use_dedicated_opcodes():
    assert push_number(0) == script(Opcode.OP_0)
    assert push_number(-1) == script(Opcode.OP_1NEGATE)
    assert push_number(16) == script(Opcode.OP_16)
    assert push_number(1) == script(Opcode.OP_TRUE)


@pytest.mark.parametrize("size", [1, 75, 76, 255, 256, 70000])
def test_push_bytes_round_trip(size):
    data = bytes(i % 251 for i in range(size))
    instructions = list(push_bytes(data))
    assert len(instructions) == 1
    assert instructions[0].data == data


def test_empty_push_is_op_0():
    assert push_bytes(b"") == script(Opcode.OP_0)
    assert list(push_bytes(b""))[0].data == b""


def test_larger_number_is_a_data_push():
    instructions = list(push_number(0x0BABE123))
    assert len(instructions) == 1
    assert instructions[0].data is not None
    assert int.from_bytes(instructions[0].data, "little") == 0x0BABE123


def test_flattening_nested_items():
    a = script(Opcode.OP_DUP)
    b = script(Opcode.OP_ADD)
    c = script(Opcode.OP_DROP)
    assert script([a, [b]], lambda: c) == a + b + c
    assert script(x for x in (a, b)) == a + b


def test_to_asm():
    s = script(Opcode.OP_DUP, push_bytes(b"\x01\x02"))
    assert s.to_asm() == "OP_DUP OP_PUSHBYTES_2 0102"


def test_len_counts_bytes():
    s = script(Opcode.OP_DUP, Opcode.OP_ADD, Opcode.OP_DROP)
    assert len(s) == 3


def test_truncated_push_raises():
    with pytest.raises(ValueError):
        list(Script(b"\x05\x01"))


def test_string_is_rejected():
    with pytest.raises(TypeError):
        script("OP_ADD")