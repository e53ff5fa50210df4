"""Winternitz one-time signatures over 4-bit digits, verified in script."""

from __future__ import annotations

import binascii
import hashlib
from typing import Sequence

from Crypto.Hash import RIPEMD160

from .script import Opcode as Op
from .script import Script, push_bytes, script

LOG_D = 4
"""Bits per digit."""
D = (1 << LOG_D) - 1
"""Digits are base D + 1."""
N0 = 80
"""Number of digits of the message."""
N1 = 4
"""Number of digits of the checksum."""
N = N0 + N1
"""Total number of digits to be signed."""


def _hash160(data: bytes) -> bytes:
    return RIPEMD160.new(hashlib.sha256(data).digest()).digest()


def _decode_key(secret_key: str) -> bytes:
    try:
        return binascii.unhexlify(secret_key)
    except (binascii.Error, ValueError):
        raise ValueError("Invalid hex string") from None


def _hash_chain(secret_key: str, digit_index: int, length: int) -> bytes:
    """Hash the digit's secret once, then `length` more times."""
    digest = _hash160(_decode_key(secret_key) + bytes([digit_index & 0xFF]))
    for _ in range(length):
        digest = _hash160(digest)
    return digest


def public_key(secret_key: str, digit_index: int) -> Script:
    """A script pushing the public key for the digit at `digit_index`."""
    return push_bytes(_hash_chain(secret_key, digit_index, D))


def digit_signature(secret_key: str, digit_index: int, message_digit: int) -> Script:
    """A script pushing the signature of one digit followed by the digit itself."""
    return script(push_bytes(_hash_chain(secret_key, digit_index, message_digit)), message_digit)


def checksum(digits: Sequence[int]) -> int:
    """The checksum of the message's digits."""
    digits = list(digits)
    if len(digits) != N0:
        raise ValueError(f"expected {N0} message digits, got {len(digits)}")
    total = sum(digits)
    if total > D * N0:
        raise ValueError(f"digit sum {total} exceeds {D * N0}")
    return D * N0 - total


def to_digits(number: int, digit_count: int) -> list[int]:
    """The `digit_count` lowest base-(D + 1) digits of `number`, least significant first."""
    digits = []
    for _ in range(digit_count):
        number, digit = divmod(number, D + 1)
        digits.append(digit)
    return digits


def _signed_digits(message_digits: Sequence[int]) -> list[int]:
    return to_digits(checksum(message_digits), N1) + list(message_digits)


def sign(secret_key: str, message_digits: Sequence[int]) -> Script:
    """A script pushing the signature of all message and checksum digits."""
    digits = _signed_digits(message_digits)
    return script(
        digit_signature(secret_key, i, digits[N - 1 - i]) for i in range(N)
    )


def _checksum_and_decode() -> Script:
    """Check the checksum against the digits on the alt stack and rebuild the bytes."""
    double_nibble = [Op.OP_DUP, Op.OP_ADD] * LOG_D
    decode = []
    for i in range(N0 // 2):
        decode += [Op.OP_SWAP, double_nibble, Op.OP_ADD]
        if i != N0 // 2 - 1:
            decode.append(Op.OP_TOALTSTACK)
    return script(
        # Checksum of the message's digits
        Op.OP_FROMALTSTACK, Op.OP_DUP, Op.OP_NEGATE,
        [Op.OP_FROMALTSTACK, Op.OP_TUCK, Op.OP_SUB] * (N0 - 1),
        D * N0, Op.OP_ADD,
        # Sum of the signed checksum's digits
        Op.OP_FROMALTSTACK,
        [[double_nibble, Op.OP_FROMALTSTACK, Op.OP_ADD] for _ in range(N1 - 1)],
        Op.OP_EQUALVERIFY,
        # Message digits to bytes
        decode,
        [Op.OP_FROMALTSTACK] * (N0 // 2 - 1),
    )


def checksig_verify(secret_key: str) -> Script:
    """Verify a signature and leave the 40 signed message bytes on the stack.

    The script inputs are malleable.
    """
    per_digit = [
        [
            D, Op.OP_MIN,
            Op.OP_DUP, Op.OP_TOALTSTACK, Op.OP_TOALTSTACK,
            [Op.OP_DUP, Op.OP_HASH160] * D,
            Op.OP_FROMALTSTACK, Op.OP_PICK,
            public_key(secret_key, N - 1 - digit_index),
            Op.OP_EQUALVERIFY,
            [Op.OP_2DROP] * ((D + 1) // 2),
        ]
        for digit_index in range(N)
    ]
    return script(per_digit, _checksum_and_decode())