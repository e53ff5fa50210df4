import pytest

from bitscript.interpreter import execute_script
from bitscript.script import Opcode as Op
from bitscript.script import script
from bitscript.winternitz_compact import (
    D,
    N,
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


def test_winternitz_compact_sign_and_verify():
    result = execute_script(script(sign(SEED_HEX, MESSAGE), checksig_verify(SEED_HEX), _check_bytes()))
    assert result.success
    assert result.error is None


def test_verify_with_wrong_key_fails():
    result = execute_script(script(sign(SEED_HEX, MESSAGE), checksig_verify(OTHER_SEED_HEX)))
    assert not result.success
    assert result.error is not None


def test_signature_is_hashes_only():
    signature = bytes(sign(SEED_HEX, MESSAGE))
    assert len(signature) == N * 21


def test_digit_signature_has_no_digit_push():
    sig = bytes(digit_signature(SEED_HEX, 4, 9))
    assert len(sig) == 21
    assert sig[0] == 20


def test_full_chain_signature_is_public_key():
    assert digit_signature(SEED_HEX, 11, D) == public_key(SEED_HEX, 11)


def test_checksum_bounds():
    assert checksum([0] * N0) == D * N0
    assert checksum([D] * N0) == 0


def test_checksum_rejects_wrong_length():
    with pytest.raises(ValueError):
        checksum([0] * (N0 + 1))


@pytest.mark.parametrize("number", [0, 7, 255, 1200])
def test_to_digits_round_trip(number):
    digits = to_digits(number, 4)
    assert sum(d * (D + 1) ** i for i, d in enumerate(digits)) == number


def test_invalid_hex_raises():
    with pytest.raises(ValueError, match="Invalid hex string"):
        digit_signature("not hex", 0, 3)