"""Bitcoin script opcodes and a small builder for tapscript programs."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Iterator, NamedTuple


class Opcode(IntEnum):
    """Script opcodes used by the builder and interpreter."""

    OP_0 = 0x00
    OP_FALSE = 0x00
    OP_PUSHDATA1 = 0x4C
    OP_PUSHDATA2 = 0x4D
    OP_PUSHDATA4 = 0x4E
    OP_1NEGATE = 0x4F
    OP_RESERVED = 0x50
    OP_1 = 0x51
    OP_TRUE = 0x51
    OP_2 = 0x52
    OP_3 = 0x53
    OP_4 = 0x54
    OP_5 = 0x55
    OP_6 = 0x56
    OP_7 = 0x57
    OP_8 = 0x58
    OP_9 = 0x59
    OP_10 = 0x5A
    OP_11 = 0x5B
    OP_12 = 0x5C
    OP_13 = 0x5D
    OP_14 = 0x5E
    OP_15 = 0x5F
    OP_16 = 0x60
    OP_NOP = 0x61
    OP_VER = 0x62
    OP_IF = 0x63
    OP_NOTIF = 0x64
    OP_VERIF = 0x65
    OP_VERNOTIF = 0x66
    OP_ELSE = 0x67
    OP_ENDIF = 0x68
    OP_VERIFY = 0x69
    OP_RETURN = 0x6A
    OP_TOALTSTACK = 0x6B
    OP_FROMALTSTACK = 0x6C
    OP_2DROP = 0x6D
    OP_2DUP = 0x6E
    OP_3DUP = 0x6F
    OP_2OVER = 0x70
    OP_2ROT = 0x71
    OP_2SWAP = 0x72
    OP_IFDUP = 0x73
    OP_DEPTH = 0x74
    OP_DROP = 0x75
    OP_DUP = 0x76
    OP_NIP = 0x77
    OP_OVER = 0x78
    OP_PICK = 0x79
    OP_ROLL = 0x7A
    OP_ROT = 0x7B
    OP_SWAP = 0x7C
    OP_TUCK = 0x7D
    OP_CAT = 0x7E
    OP_SIZE = 0x82
    OP_EQUAL = 0x87
    OP_EQUALVERIFY = 0x88
    OP_1ADD = 0x8B
    OP_1SUB = 0x8C
    OP_NEGATE = 0x8F
    OP_ABS = 0x90
    OP_NOT = 0x91
    OP_0NOTEQUAL = 0x92
    OP_ADD = 0x93
    OP_SUB = 0x94
    OP_BOOLAND = 0x9A
    OP_BOOLOR = 0x9B
    OP_NUMEQUAL = 0x9C
    OP_NUMEQUALVERIFY = 0x9D
    OP_NUMNOTEQUAL = 0x9E
    OP_LESSTHAN = 0x9F
    OP_GREATERTHAN = 0xA0
    OP_LESSTHANOREQUAL = 0xA1
    OP_GREATERTHANOREQUAL = 0xA2
    OP_MIN = 0xA3
    OP_MAX = 0xA4
    OP_WITHIN = 0xA5
    OP_RIPEMD160 = 0xA6
    OP_SHA1 = 0xA7
    OP_SHA256 = 0xA8
    OP_HASH160 = 0xA9
    OP_HASH256 = 0xAA
    OP_CODESEPARATOR = 0xAB
    OP_CHECKSIG = 0xAC
    OP_CHECKSIGVERIFY = 0xAD
    OP_NOP1 = 0xB0
    OP_CHECKLOCKTIMEVERIFY = 0xB1
    OP_CLTV = 0xB1
    OP_CHECKSEQUENCEVERIFY = 0xB2
    OP_CSV = 0xB2
    OP_NOP4 = 0xB3
    OP_NOP5 = 0xB4
    OP_NOP6 = 0xB5
    OP_NOP7 = 0xB6
    OP_NOP8 = 0xB7
    OP_NOP9 = 0xB8
    OP_NOP10 = 0xB9


_OPCODE_VALUES = {member.value for member in Opcode}


class _Instruction(NamedTuple):
    """One decoded instruction: its opcode, pushed data (if a push) and end offset."""

    opcode: int
    data: bytes | None
    end: int


def _opcode_name(opcode: int) -> str:
    if 0x01 <= opcode <= 0x4B:
        return f"OP_PUSHBYTES_{opcode}"
    if opcode in _OPCODE_VALUES:
        return Opcode(opcode).name
    return f"OP_UNKNOWN_0x{opcode:02x}"


def _encode_num(n: int) -> bytes:
    """Encode an integer in the minimal script-number format."""
    if n == 0:
        return b""
    negative = n < 0
    magnitude = abs(n)
    out = bytearray()
    while magnitude:
        out.append(magnitude & 0xFF)
        magnitude >>= 8
    if out[-1] & 0x80:
        out.append(0x80 if negative else 0x00)
    elif negative:
        out[-1] |= 0x80
    return bytes(out)


class Script:
    """An immutable sequence of script bytes."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes | bytearray = b"") -> None:
        self._raw = bytes(raw)

    def __bytes__(self) -> bytes:
        return self._raw

    def __len__(self) -> int:
        return len(self._raw)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Script):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)

    def __add__(self, other: "Script") -> "Script":
        if not isinstance(other, Script):
            return NotImplemented
        return Script(self._raw + other._raw)

    def __repr__(self) -> str:
        return f"Script({self.to_asm()!r})"

    def __iter__(self) -> Iterator[_Instruction]:
        """Decode the script into instructions; raises ValueError on a truncated push."""
        raw = self._raw
        pos = 0
        while pos < len(raw):
            op = raw[pos]
            pos += 1
            if op == Opcode.OP_0:
                yield _Instruction(op, b"", pos)
                continue
            if op <= 0x4B:
                size = op
            elif op in (Opcode.OP_PUSHDATA1, Opcode.OP_PUSHDATA2, Opcode.OP_PUSHDATA4):
                width = {0x4C: 1, 0x4D: 2, 0x4E: 4}[op]
                if pos + width > len(raw):
                    raise ValueError("truncated push length")
                size = int.from_bytes(raw[pos:pos + width], "little")
                pos += width
            else:
                yield _Instruction(op, None, pos)
                continue
            if pos + size > len(raw):
                raise ValueError("truncated push data")
            yield _Instruction(op, raw[pos:pos + size], pos + size)
            pos += size

    def to_asm(self) -> str:
        """Render the script in human-readable assembly."""
        parts = []
        for ins in self:
            if ins.data is not None and ins.opcode != Opcode.OP_0:
                parts.append(f"{_opcode_name(ins.opcode)} {ins.data.hex()}")
            else:
                parts.append(_opcode_name(ins.opcode))
        return " ".join(parts)


def push_bytes(data: bytes | bytearray) -> Script:
    """A script that pushes `data` as a single stack element."""
    data = bytes(data)
    size = len(data)
    if size == 0:
        return Script(bytes([Opcode.OP_0]))
    if size <= 0x4B:
        prefix = bytes([size])
    elif size <= 0xFF:
        prefix = bytes([Opcode.OP_PUSHDATA1, size])
    elif size <= 0xFFFF:
        prefix = bytes([Opcode.OP_PUSHDATA2]) + size.to_bytes(2, "little")
    else:
        prefix = bytes([Opcode.OP_PUSHDATA4]) + size.to_bytes(4, "little")
    return Script(prefix + data)


def push_number(n: int) -> Script:
    """A script that pushes the integer `n` in its shortest form."""
    if n == 0:
        return Script(bytes([Opcode.OP_0]))
    if n == -1:
        return Script(bytes([Opcode.OP_1NEGATE]))
    if 1 <= n <= 16:
        return Script(bytes([Opcode.OP_1 + n - 1]))
    return push_bytes(_encode_num(n))


def _emit(item: Any, out: bytearray) -> None:
    if isinstance(item, Script):
        out += bytes(item)
    elif isinstance(item, Opcode):
        out.append(item.value)
    elif isinstance(item, bool):
        raise TypeError("booleans cannot be pushed; use an integer")
    elif isinstance(item, int):
        out += bytes(push_number(item))
    elif isinstance(item, (bytes, bytearray)):
        out += bytes(push_bytes(item))
    elif callable(item):
        _emit(item(), out)
    elif isinstance(item, str):
        raise TypeError(f"cannot place string {item!r} in a script")
    else:
        try:
            parts = iter(item)
        except TypeError:
            raise TypeError(f"cannot place {type(item).__name__} in a script") from None
        for part in parts:
            _emit(part, out)


def script(*args: Any) -> Script:
    """Build a script from opcodes, integers, byte strings, scripts,
    zero-argument callables returning scripts, and iterables of these."""
    out = bytearray()
    for arg in args:
        _emit(arg, out)
    return Script(out)