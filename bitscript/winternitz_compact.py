"""Compact Winternitz signatures: the digits are recovered from the signature hashes.

This reduces stack usage at the expense of script size.
"""

from __future__ import annotations

from typing import Sequence

from . import winternitz as _winternitz
from .script import Opcode as Op
from .script import Script, push_bytes, script
from .winternitz import (
    D,
    LOG_D,
    N,
    N0,
    N1,
    _checksum_and_decode,
    _hash_chain,
    _signed_digits,
)

__all__ = [
    "D", "LOG_D", "N", "N0", "N1",
    "public_key", "digit_signature", "checksum", "to_digits", "sign", "checksig_verify",
]


def public_key(secret_key: str, digit_index: int) -> Script:
    """A script pushing the public key of the given digit: the end of its hash chain."""
    return _winternitz.public_key(secret_key, digit_index)


def checksum(digits: Sequence[int]) -> int:
    """The checksum of the message digits: D * N0 minus their sum."""
    return _winternitz.checksum(digits)


def to_digits(number: int, digit_count: int) -> list[int]:
    """Split ``number`` into ``digit_count`` base-(D+1) digits, least significant first."""
    return _winternitz.to_digits(number, digit_count)


def digit_signature(secret_key: str, digit_index: int, message_digit: int) -> Script:
    """A script pushing the signature of one digit, without the digit itself."""
    return push_bytes(_hash_chain(secret_key, digit_index, message_digit))


def sign(secret_key: str, message_digits: Sequence[int]) -> Script:
    """A script pushing the signature hashes of all message and checksum digits."""
    digits = _signed_digits(message_digits)
    return script(
        digit_signature(secret_key, i, digits[N - 1 - i]) for i in range(N)
    )


def checksig_verify(secret_key: str) -> Script:
    """Verify a signature and leave the 40 signed message bytes on the stack.

    The alt stack must be empty at the start: an invalid hash leaves one digit
    missing and the script then fails when reading it back.
    """
    per_digit = [
        [
            public_key(secret_key, N - 1 - digit_index),
            Op.OP_SWAP,
            Op.OP_2DUP, Op.OP_EQUAL,
            Op.OP_IF, D, Op.OP_TOALTSTACK, Op.OP_ENDIF,
            [
                [
                    Op.OP_HASH160,
                    Op.OP_2DUP, Op.OP_EQUAL,
                    Op.OP_IF, D - i - 1, Op.OP_TOALTSTACK, Op.OP_ENDIF,
                ]
                for i in range(D)
            ],
            Op.OP_2DROP,
        ]
        for digit_index in range(N)
    ]
    return script(per_digit, _checksum_and_decode())