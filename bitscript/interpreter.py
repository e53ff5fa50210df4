"""A tapscript interpreter reporting the outcome of a script run."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from Crypto.Hash import RIPEMD160

from .script import Opcode, Script, _encode_num, _opcode_name, _OPCODE_VALUES

MAX_STACK_SIZE = 1000
MAX_ELEMENT_SIZE = 520
MAX_NUM_SIZE = 4


class ExecError(Exception):
    """A failure during script execution."""

    def __init__(self, kind: str) -> None:
        super().__init__(kind)
        self.kind = kind

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ExecError) and other.kind == self.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"ExecError({self.kind!r})"


@dataclass
class ExecStats:
    """Counters gathered while executing."""

    opcode_count: int = 0
    max_nb_stack_items: int = 0


class FinalStack:
    """The main stack at the end of execution, bottom first."""

    def __init__(self, items: list[bytes]) -> None:
        self._items = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def get(self, index: int) -> bytes:
        """The element at `index`, counted from the bottom."""
        return self._items[index]

    def format(self, width: int) -> str:
        """Render the stack with `width` elements per row."""
        out = ["\n0:\t\t "]
        count = len(self._items)
        for index, item in enumerate(self._items):
            out.append(f"0x{item.hex():<8}")
            if index + 1 < count:
                if (index + 1) % width == 0:
                    out.append(f"\n{index + 1}:\t\t")
                out.append(" ")
        return "".join(out)

    def __str__(self) -> str:
        return self.format(4)

    def __repr__(self) -> str:
        return str(self)


@dataclass
class ExecuteInfo:
    """The result of running a script."""

    success: bool
    error: ExecError | None
    final_stack: FinalStack
    remaining_script: str
    last_opcode: int | None
    stats: ExecStats = field(default_factory=ExecStats)

    def format(self, width: int | None = None) -> str:
        """Render a report; `width` is the number of stack elements per row."""
        lines = ["Script execution successful." if self.success else "Script execution failed!"]
        if self.error is not None:
            lines.append(f"Error: {self.error!r}")
        if self.remaining_script:
            lines.append(f"Remaining Script: {self.remaining_script}")
        if len(self.final_stack):
            lines.append(f"Final Stack: {self.final_stack.format(width or 4)}")
        if self.last_opcode is not None:
            lines.append(f"Last Opcode: {_opcode_name(self.last_opcode)}")
        lines.append(f"Stats: {self.stats!r}")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.format()


def _decode_num(data: bytes, max_size: int = MAX_NUM_SIZE) -> int:
    if len(data) > max_size:
        raise ExecError("NumberOverflow")
    if not data:
        return 0
    value = int.from_bytes(data, "little")
    if data[-1] & 0x80:
        value &= ~(0x80 << (8 * (len(data) - 1)))
        value = -value
    return value


def _cast_bool(data: bytes) -> bool:
    for i, byte in enumerate(data):
        if byte:
            return not (i == len(data) - 1 and byte == 0x80)
    return False


_UNARY = {
    Opcode.OP_1ADD: lambda a: a + 1,
    Opcode.OP_1SUB: lambda a: a - 1,
    Opcode.OP_NEGATE: lambda a: -a,
    Opcode.OP_ABS: abs,
    Opcode.OP_NOT: lambda a: int(a == 0),
    Opcode.OP_0NOTEQUAL: lambda a: int(a != 0),
}

_BINARY = {
    Opcode.OP_ADD: lambda a, b: a + b,
    Opcode.OP_SUB: lambda a, b: a - b,
    Opcode.OP_BOOLAND: lambda a, b: int(a != 0 and b != 0),
    Opcode.OP_BOOLOR: lambda a, b: int(a != 0 or b != 0),
    Opcode.OP_NUMEQUAL: lambda a, b: int(a == b),
    Opcode.OP_NUMEQUALVERIFY: lambda a, b: int(a == b),
    Opcode.OP_NUMNOTEQUAL: lambda a, b: int(a != b),
    Opcode.OP_LESSTHAN: lambda a, b: int(a < b),
    Opcode.OP_GREATERTHAN: lambda a, b: int(a > b),
    Opcode.OP_LESSTHANOREQUAL: lambda a, b: int(a <= b),
    Opcode.OP_GREATERTHANOREQUAL: lambda a, b: int(a >= b),
    Opcode.OP_MIN: min,
    Opcode.OP_MAX: max,
}

_HASHES = {
    Opcode.OP_RIPEMD160: lambda d: RIPEMD160.new(d).digest(),
    Opcode.OP_SHA1: lambda d: hashlib.sha1(d).digest(),
    Opcode.OP_SHA256: lambda d: hashlib.sha256(d).digest(),
    Opcode.OP_HASH160: lambda d: RIPEMD160.new(hashlib.sha256(d).digest()).digest(),
    Opcode.OP_HASH256: lambda d: hashlib.sha256(hashlib.sha256(d).digest()).digest(),
}

_NOPS = {
    Opcode.OP_NOP, Opcode.OP_NOP1, Opcode.OP_NOP4, Opcode.OP_NOP5, Opcode.OP_NOP6,
    Opcode.OP_NOP7, Opcode.OP_NOP8, Opcode.OP_NOP9, Opcode.OP_NOP10, Opcode.OP_CODESEPARATOR,
}


class _Machine:
    def __init__(self) -> None:
        self.stack: list[bytes] = []
        self.alt: list[bytes] = []
        self.cond: list[bool] = []
        self.stats = ExecStats()

    def need(self, n: int) -> None:
        if len(self.stack) < n:
            raise ExecError("InvalidStackOperation")

    def pop(self) -> bytes:
        self.need(1)
        return self.stack.pop()

    def pop_num(self) -> int:
        return _decode_num(self.pop())

    def push(self, item: bytes) -> None:
        if len(item) > MAX_ELEMENT_SIZE:
            raise ExecError("PushSize")
        self.stack.append(item)

    def push_bool(self, value: bool) -> None:
        self.stack.append(b"\x01" if value else b"")

    def step(self, opcode: int, data: bytes | None) -> None:
        executing = all(self.cond)
        if data is not None:
            if executing:
                self.push(data)
        elif opcode in (Opcode.OP_IF, Opcode.OP_NOTIF):
            value = False
            if executing:
                top = self.pop()
                if top not in (b"", b"\x01"):
                    raise ExecError("TapscriptMinimalIf")
                value = (top == b"\x01") == (opcode == Opcode.OP_IF)
            self.cond.append(value)
        elif opcode == Opcode.OP_ELSE:
            if not self.cond:
                raise ExecError("UnbalancedConditional")
            self.cond[-1] = not self.cond[-1]
        elif opcode == Opcode.OP_ENDIF:
            if not self.cond:
                raise ExecError("UnbalancedConditional")
            self.cond.pop()
        elif executing:
            self.stats.opcode_count += 1
            self.execute(opcode)
        items = len(self.stack) + len(self.alt)
        if items > MAX_STACK_SIZE:
            raise ExecError("StackSize")
        self.stats.max_nb_stack_items = max(self.stats.max_nb_stack_items, items)

    def execute(self, opcode: int) -> None:
        s = self.stack
        if Opcode.OP_1 <= opcode <= Opcode.OP_16:
            s.append(_encode_num(opcode - Opcode.OP_1 + 1))
        elif opcode == Opcode.OP_1NEGATE:
            s.append(_encode_num(-1))
        elif opcode in _NOPS:
            pass
        elif opcode in _UNARY:
            s.append(_encode_num(_UNARY[opcode](self.pop_num())))
        elif opcode in _BINARY:
            b = self.pop_num()
            a = self.pop_num()
            s.append(_encode_num(_BINARY[opcode](a, b)))
            if opcode == Opcode.OP_NUMEQUALVERIFY:
                self.verify("NumEqualVerify")
        elif opcode in _HASHES:
            s.append(_HASHES[opcode](self.pop()))
        elif opcode == Opcode.OP_WITHIN:
            upper = self.pop_num()
            lower = self.pop_num()
            x = self.pop_num()
            self.push_bool(lower <= x < upper)
        elif opcode == Opcode.OP_VERIFY:
            self.verify("Verify")
        elif opcode == Opcode.OP_RETURN:
            raise ExecError("OpReturn")
        elif opcode == Opcode.OP_TOALTSTACK:
            self.alt.append(self.pop())
        elif opcode == Opcode.OP_FROMALTSTACK:
            if not self.alt:
                raise ExecError("InvalidAltstackOperation")
            s.append(self.alt.pop())
        elif opcode == Opcode.OP_2DROP:
            self.need(2)
            del s[-2:]
        elif opcode == Opcode.OP_2DUP:
            self.need(2)
            s.extend(s[-2:])
        elif opcode == Opcode.OP_3DUP:
            self.need(3)
            s.extend(s[-3:])
        elif opcode == Opcode.OP_2OVER:
            self.need(4)
            s.extend(s[-4:-2])
        elif opcode == Opcode.OP_2ROT:
            self.need(6)
            moved = s[-6:-4]
            del s[-6:-4]
            s.extend(moved)
        elif opcode == Opcode.OP_2SWAP:
            self.need(4)
            s[-4:] = s[-2:] + s[-4:-2]
        elif opcode == Opcode.OP_IFDUP:
            self.need(1)
            if _cast_bool(s[-1]):
                s.append(s[-1])
        elif opcode == Opcode.OP_DEPTH:
            s.append(_encode_num(len(s)))
        elif opcode == Opcode.OP_DROP:
            self.pop()
        elif opcode == Opcode.OP_DUP:
            self.need(1)
            s.append(s[-1])
        elif opcode == Opcode.OP_NIP:
            self.need(2)
            del s[-2]
        elif opcode == Opcode.OP_OVER:
            self.need(2)
            s.append(s[-2])
        elif opcode in (Opcode.OP_PICK, Opcode.OP_ROLL):
            n = self.pop_num()
            if n < 0 or n >= len(s):
                raise ExecError("InvalidStackOperation")
            item = s[-1 - n]
            if opcode == Opcode.OP_ROLL:
                del s[-1 - n]
            s.append(item)
        elif opcode == Opcode.OP_ROT:
            self.need(3)
            s.append(s.pop(-3))
        elif opcode == Opcode.OP_SWAP:
            self.need(2)
            s[-2], s[-1] = s[-1], s[-2]
        elif opcode == Opcode.OP_TUCK:
            self.need(2)
            s.insert(-2, s[-1])
        elif opcode == Opcode.OP_CAT:
            b = self.pop()
            a = self.pop()
            self.push(a + b)
        elif opcode == Opcode.OP_SIZE:
            self.need(1)
            s.append(_encode_num(len(s[-1])))
        elif opcode in (Opcode.OP_EQUAL, Opcode.OP_EQUALVERIFY):
            b = self.pop()
            a = self.pop()
            self.push_bool(a == b)
            if opcode == Opcode.OP_EQUALVERIFY:
                self.verify("EqualVerify")
        elif opcode == Opcode.OP_CHECKLOCKTIMEVERIFY:
            self.need(1)
            n = _decode_num(s[-1], 5)
            if n < 0:
                raise ExecError("NegativeLocktime")
            if n > 0:
                raise ExecError("UnsatisfiedLocktime")
        elif opcode == Opcode.OP_CHECKSEQUENCEVERIFY:
            self.need(1)
            n = _decode_num(s[-1], 5)
            if n < 0:
                raise ExecError("NegativeLocktime")
            if not n & (1 << 31):
                # The transaction template carries no inputs to check against.
                raise ExecError("UnsatisfiedLocktime")
        elif opcode in (Opcode.OP_CHECKSIG, Opcode.OP_CHECKSIGVERIFY):
            raise ExecError("UnsupportedOpcode")
        else:
            raise ExecError("BadOpcode" if opcode in _OPCODE_VALUES else "UnknownOpcode")

    def verify(self, kind: str) -> None:
        if not _cast_bool(self.pop()):
            raise ExecError(kind)


def execute_script(script: Script) -> ExecuteInfo:
    """Run `script` as a tapscript leaf and report the outcome."""
    machine = _Machine()
    raw = bytes(script)
    last_opcode: int | None = None
    position = 0
    error: ExecError | None = None
    try:
        for ins in script:
            last_opcode = ins.opcode
            position = ins.end
            machine.step(ins.opcode, ins.data)
        if machine.cond:
            raise ExecError("UnbalancedConditional")
    except ExecError as exc:
        error = exc
    except ValueError:
        error = ExecError("BadPush")
        position = len(raw)

    if error is None:
        success = len(machine.stack) == 1 and _cast_bool(machine.stack[0])
        remaining = ""
    else:
        success = False
        remaining = Script(raw[position:]).to_asm()
    if last_opcode is not None and last_opcode in _OPCODE_VALUES:
        last_opcode = Opcode(last_opcode)
    return ExecuteInfo(
        success=success,
        error=error,
        final_stack=FinalStack(machine.stack),
        remaining_script=remaining,
        last_opcode=last_opcode,
        stats=machine.stats,
    )