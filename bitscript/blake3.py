"""BLAKE3 hashing of byte strings held on the stack, built from u32 operations."""

from __future__ import annotations

from dataclasses import dataclass

from .script import Opcode as Op
from .script import Script, push_number, script
from .u32_add import u32_add
from .u32_rrot import u32_rrot7, u32_rrot8, u32_rrot12, u32_rrot16
from .u32_std import u32_drop, u32_equalverify, u32_fromaltstack, u32_push, u32_roll, u32_toaltstack
from .u32_xor import u32_xor, u8_drop_xor_table, u8_push_xor_table

IV = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)

MSG_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)

MAX_INPUT_BYTES = 512

# Size of the XOR lookup table, counted in u32 elements.
_TABLE_U32S = 256 // 4


@dataclass(frozen=True)
class Ptr:
    """Names a u32 element on the stack: a state word or a message word."""

    is_message: bool
    index: int

    def __repr__(self) -> str:
        return f"{'M' if self.is_message else 'S'}({self.index})"


def state(i: int) -> Ptr:
    """Pointer to the i-th state word."""
    return Ptr(False, i)


def message(i: int) -> Ptr:
    """Pointer to the i-th message word."""
    return Ptr(True, i)


class Env(dict):
    """Tracks the stack position (in u32 elements, from the top) of each pointer."""

    def ptr(self, ptr: Ptr) -> int:
        """The current position of `ptr`."""
        return self[ptr]

    def extract(self, ptr: Ptr) -> int:
        """The position of `ptr`, removing it and closing the gap it leaves."""
        index = self.pop(ptr)
        for key, value in list(self.items()):
            if value > index:
                self[key] = value - 1
        return index

    def insert(self, ptr: Ptr) -> None:
        """Place `ptr` on top of the stack, pushing every other element down."""
        for key in list(self):
            self[key] += 1
        self[ptr] = 0


def ptr_init() -> Env:
    """Positions for 16 state words above the XOR table and 16 message words."""
    env = Env()
    for i in range(16):
        env[state(i)] = i
        env[message(i)] = i + 16 + _TABLE_U32S
    return env


def ptr_init_160() -> Env:
    """Positions for a 40-byte message followed by six zero padding words."""
    env = Env()
    for i in range(16):
        env[state(i)] = i
        env[message(i)] = i + 16 + _TABLE_U32S + (6 if i < 10 else -10)
    return env


def _push_state(words) -> list[Script]:
    return [u32_push(word) for word in reversed(words)]


def initial_state(block_len: int) -> list[Script]:
    """Scripts pushing the initial state for a single-block message."""
    return _push_state([*IV, *IV[:4], 0, 0, block_len, 0b00001011])


def _g(env: Env, ap: int, a: Ptr, b: Ptr, c: Ptr, d: Ptr, m0: Ptr, m1: Ptr) -> Script:
    body = script(
        # z = a + b + m0
        u32_add(env.ptr(b), env.extract(a)),
        u32_add(env.ptr(m0) + 1, 0),
        # y = (d ^ z) >>> 16
        u32_xor(0, env.extract(d) + 1, ap + 1),
        u32_rrot16(),
        # x = y + c
        u32_add(0, env.extract(c) + 2),
        # w = (b ^ x) >>> 12
        u32_xor(0, env.extract(b) + 3, ap + 1),
        u32_rrot12(),
        # v = z + w + m1
        u32_add(0, 3),
        u32_add(env.ptr(m1) + 4, 0),
        # u = (y ^ v) >>> 8
        u32_xor(0, 3, ap + 1),
        u32_rrot8(),
        # t = x + u
        u32_add(0, 3),
        # s = (w ^ t) >>> 7
        u32_xor(0, 3, ap + 1),
        u32_rrot7(),
    )
    for ptr in (a, d, c, b):
        env.insert(ptr)
    return body


_ROUND_SCHEDULE = (
    (0, 4, 8, 12), (1, 5, 9, 13), (2, 6, 10, 14), (3, 7, 11, 15),
    (0, 5, 10, 15), (1, 6, 11, 12), (2, 7, 8, 13), (3, 4, 9, 14),
)


def blake3_round(env: Env, ap: int) -> Script:
    """One BLAKE3 round: four column mixes followed by four diagonal mixes."""
    parts = []
    for column, (a, b, c, d) in enumerate(_ROUND_SCHEDULE):
        parts.append(_g(
            env, ap, state(a), state(b), state(c), state(d),
            message(2 * column), message(2 * column + 1),
        ))
    return script(parts)


def permute(env: Env) -> None:
    """Apply the message permutation by relabelling message pointers."""
    previous = [env.ptr(message(i)) for i in range(16)]
    for i, source in enumerate(MSG_PERMUTATION):
        env[message(i)] = previous[source]


def _rounds(env: Env, ap: int) -> Script:
    parts = [blake3_round(env, ap)]
    for _ in range(6):
        permute(env)
        parts.append(blake3_round(env, ap))
    return script(parts)


def _finalize(env: Env, ap: int, words: int) -> Script:
    return script(
        u32_xor(env.ptr(state(i)) + i, env.extract(state(i + 8)) + i, ap + 1)
        for i in range(words)
    )


def _compress(env: Env, ap: int) -> Script:
    rounds = _rounds(env, ap)
    return rounds + _finalize(env, ap, 8)


def _compress_160(env: Env, ap: int) -> Script:
    rounds = _rounds(env, ap)
    return rounds + _finalize(env, ap, 5)


def blake3() -> Script:
    """Hash a 64-byte message into a 32-byte digest."""
    env = ptr_init()
    return script(
        u8_push_xor_table(),
        initial_state(64),
        _compress(env, 16),
        [u32_toaltstack()] * 8,
        [u32_drop()] * 24,
        u8_drop_xor_table(),
        [u32_fromaltstack()] * 8,
    )


def blake3_var_length(num_bytes: int) -> Script:
    """Hash a message of `num_bytes` bytes (at most 512) into a 32-byte digest."""
    if num_bytes > MAX_INPUT_BYTES:
        raise ValueError(
            f"inputs larger than {MAX_INPUT_BYTES} bytes exceed the stack limit, got {num_bytes}"
        )

    num_blocks = (num_bytes + 63) // 64
    num_padding = num_blocks * 64 - num_bytes

    parts: list = [[Op.OP_0] * num_padding]
    if num_padding:
        parts.append([num_bytes + num_padding - 1, Op.OP_ROLL] * num_bytes)

    parts.append(u8_push_xor_table())

    first_flag = 0b00001011 if num_bytes <= 64 else 0b00000001
    parts.append(_push_state([*IV, *IV[:4], 0, 0, min(num_bytes, 64), first_flag]))

    env = ptr_init()
    compression = script(
        _compress(env, 16),
        # Drop the consumed message block.
        321,
        [Op.OP_DUP, Op.OP_ROLL, Op.OP_DROP] * 63,
        Op.OP_1SUB, Op.OP_ROLL, Op.OP_DROP,
        [u32_toaltstack()] * 8,
        [u32_drop()] * 8,
    )
    parts.append(compression)

    remaining = num_bytes
    for block in range(1, num_blocks):
        remaining -= 64
        flag = 0b00001010 if block == num_blocks - 1 else 0
        parts.append(script(
            _push_state([*IV[:4], 0, 0, min(remaining, 64), flag]),
            [u32_fromaltstack()] * 8,
            [u32_roll(i) for i in range(1, 8)],
            compression,
        ))

    parts.append(u8_drop_xor_table())
    parts.append([u32_fromaltstack()] * 8)
    return script(parts)


def blake3_160() -> Script:
    """Hash a 40-byte message into a 20-byte digest."""
    env = ptr_init_160()
    return script(
        [u32_push(0)] * 6,
        u8_push_xor_table(),
        initial_state(40),
        _compress_160(env, 16),
        [u32_toaltstack()] * 5,
        [u32_drop()] * 27,
        u8_drop_xor_table(),
        [u32_fromaltstack()] * 5,
    )


def push_bytes_hex(hex_str: str) -> Script:
    """Push each byte of a hex string as a number, last byte first.

    Characters other than ASCII letters and digits are ignored.
    """
    digits = "".join(ch for ch in hex_str if ch.isascii() and ch.isalnum())
    data = bytes.fromhex(digits)
    return script(push_number(byte) for byte in reversed(data))


def blake3_hash_equalverify() -> Script:
    """Fail unless the top two 32-byte digests are equal."""
    return script(
        [Op.OP_TOALTSTACK] * 28,
        u32_equalverify(),
        [[Op.OP_FROMALTSTACK] * 4 + [u32_equalverify()] for _ in range(7)],
    )


def blake3_160_hash_equalverify() -> Script:
    """Fail unless the top two 20-byte digests are equal."""
    return script(
        [Op.OP_TOALTSTACK] * 16,
        u32_equalverify(),
        [[Op.OP_FROMALTSTACK] * 4 + [u32_equalverify()] for _ in range(4)],
    )