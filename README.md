# bitscript

A library for writing Bitcoin tapscripts in Python and running them in a
built-in interpreter. It includes script gadgets for 32-bit arithmetic,
BLAKE3 hashing and Winternitz one-time signatures.

## Modules

- `bitscript.script`: the immutable `Script` type, the `Opcode` enumeration
  and the `script(*args)` builder. The builder accepts opcodes, integers
  (pushed in their shortest form), byte strings, other scripts, zero-argument
  callables that return one of these, and iterables of any of them.
  `push_number(n)` and `push_bytes(data)` build single pushes, and
  `Script.to_asm()` renders the script as readable assembly.
- `bitscript.interpreter`: `execute_script(script)` runs a script and
  returns an `ExecuteInfo` with these fields:
  - `success`: true when execution ends with exactly one true item on the stack.
  - `error`: an `ExecError` or `None`.
  - `final_stack`: a `FinalStack`. `get(index)` counts from the bottom.
  - `remaining_script`: the part of the script that did not run, as assembly.
  - `last_opcode`: the last opcode reached.
  - `stats`: an `ExecStats` holding the opcode count and the largest number
    of stack items seen.

  `ExecuteInfo.format(width)` and `FinalStack.format(width)` print the stack
  with `width` elements per row.
- `bitscript.pseudo`: helpers that act on several items at once, such as
  `op_4pick`, `op_4roll`, `op_4dup`, `op_4swap`, `op_2k_mul(k)` and `op_256mul`.
- `bitscript.u32_std`, `u32_zip`, `u32_add`, `u32_rrot`, `u32_xor`: 32-bit
  values held on the stack as four bytes. They provide push, compare, roll,
  pick, addition, right rotations by 7, 8, 12 and 16 bits, and XOR. XOR uses a
  lookup table that `u8_push_xor_table()` places on the stack.
- `bitscript.blake3`: BLAKE3 in script.
  - `blake3()` hashes a 64-byte input.
  - `blake3_var_length(num_bytes)` hashes an input of up to 512 bytes and
    raises `ValueError` above that.
  - `blake3_160()` hashes 40 bytes into a 20-byte digest.
  - `push_bytes_hex`, `blake3_hash_equalverify` and
    `blake3_160_hash_equalverify` push digests and compare them.
- `bitscript.winternitz` and `bitscript.winternitz_compact`: Winternitz
  one-time signatures over 80 four-bit digits with a four-digit checksum.
  - `sign(secret_key, message_digits)` builds the unlocking script.
  - `checksig_verify(secret_key)` verifies the signature and leaves the 40
    signed message bytes on the stack.
  - In the compact variant the signature does not carry the digits. The
    script recovers them from the hashes.

## Installation

```
pip install .
```

## Example

```python
from bitscript.script import script, Opcode
from bitscript.interpreter import execute_script
from bitscript.u32_std import u32_push
from bitscript.u32_add import u32_add_drop

s = script(
    u32_push(0xFFEEFFEE),
    u32_push(0xEEFFEEFF),
    u32_add_drop(1, 0),
    0xED, Opcode.OP_EQUALVERIFY,
    0xEE, Opcode.OP_EQUALVERIFY,
    0xEE, Opcode.OP_EQUALVERIFY,
    0xEE, Opcode.OP_EQUAL,
)
result = execute_script(s)
assert result.success
print(result.format(4))
```

Hashing in script:

```python
from bitscript.script import script, Opcode
from bitscript.interpreter import execute_script
from bitscript.blake3 import blake3_var_length, push_bytes_hex, blake3_hash_equalverify

s = script(
    push_bytes_hex("0112d68f3c1d66dbc8009a2654f262a7275e583a921d068fd4b167003365ce1d"),
    blake3_var_length(32),
    push_bytes_hex("5af371034ff540ac876243113457de647144c164d8c70c67af54676decf693d1"),
    blake3_hash_equalverify(),
    Opcode.OP_TRUE,
)
assert execute_script(s).success
```

## What it does not do

The interpreter runs scripts without any transaction context:

- `OP_CHECKSIG` and `OP_CHECKSIGVERIFY` fail with an `UnsupportedOpcode` error.
- Lock-time and sequence checks cannot be satisfied.

The package is a library only. It has no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```