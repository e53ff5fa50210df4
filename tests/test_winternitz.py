import pytest

from bitscript.interpreter import execute_script
from bitscript.script import Opcode as Op
from bitscript.script import script
from bitscript.winternitz import (
    D,
    N0,
    checksig_verify,
    checksum,
    digit_signature,
    public_key,
    sign,
    to_digits,
)

SEED_HEX = "0102030405060708090a0b0c0d0e0f1011121314"
OTHER_SEED_HEX = "14131211100f0e0d0c0b0a090807060504030201"

ROW = [1, 2, 3, 4, 5, 6, 7, 8, 9, 0xA, 0xB, 0xC, 0xD, 0xE, 0xF, 7, 7, 7, 7, 7]
MESSAGE = ROW * 4
EXPECTED_BYTES = [0x21, 0x43, 0x65, 0x87, 0xA9, 0xCB, 0xED, 0x7F, 0x77, 0x77] * 4


def _check_bytes():
    return script(
        [[b, Op.OP_EQUALVERIFY] for b in EXPECTED_BYTES[:-1]],
        EXPECTED_BYTES[-1],
        Op.OP_EQUAL,
    )


def test_winternitz_sign_and_verify():
    result = execute_script(script(sign(SEED_HEX, MESSAGE), checksig_verify(SEED_HEX), _check_bytes()))
    assert result.success
    assert result.error is None


def test_verify_with_wrong_key_fails():
    result = execute_script(script(sign(SEED_HEX, MESSAGE), checksig_verify(OTHER_SEED_HEX)))
    assert not result.success
    assert result.error is not None and result.error.kind == "EqualVerify"


def test_checksum_bounds():
    assert checksum([0] * N0) == D * N0
    assert checksum([D] * N0) == 0


def test_checksum_rejects_wrong_length():
    with pytest.raises(ValueError):
        checksum([1] * (N0 - 1))


def test_checksum_rejects_overflow():
    with pytest.raises(ValueError):
        checksum([D + 1] * N0)


@pytest.mark.parametrize("number", [0, 1, 15, 16, 580, 1200, 65535])
def test_to_digits_round_trip(number):
    digits = to_digits(number, 4)
    assert len(digits) == 4
    assert all(0 <= d <= D for d in digits)
    assert sum(d * (D + 1) ** i for i, d in enumerate(digits)) == number


def test_to_digits_zero():
    assert to_digits(0, 3) == [0, 0, 0]


def test_public_key_is_a_20_byte_push():
    key = bytes(public_key(SEED_HEX, 3))
    assert len(key) == 21
    assert key[0] == 20


def test_public_key_depends_on_index_and_key():
    assert public_key(SEED_HEX, 0) == public_key(SEED_HEX, 0)
    assert public_key(SEED_HEX, 0) != public_key(SEED_HEX, 1)
    assert public_key(SEED_HEX, 0) != public_key(OTHER_SEED_HEX, 0)


def test_full_chain_signature_matches_public_key():
    sig = bytes(digit_signature(SEED_HEX, 5, D))
    assert sig[:21] == bytes(public_key(SEED_HEX, 5))
    assert sig[21] == Op.OP_15


def test_digit_signature_ends_with_digit():
    sig = bytes(digit_signature(SEED_HEX, 2, 7))
    assert len(sig) == 22
    assert sig[-1] == Op.OP_7


def test_invalid_hex_raises():
    with pytest.raises(ValueError, match="Invalid hex string"):
        public_key("zz", 0)
    with pytest.raises(ValueError, match="Invalid hex string"):
        digit_signature("abc", 0, 1)