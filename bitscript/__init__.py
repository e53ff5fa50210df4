"""Bitcoin tapscript builder and interpreter with u32, BLAKE3 and Winternitz script gadgets."""

__version__ = "0.1.0"

__all__ = [
    "script",
    "interpreter",
    "pseudo",
    "u32_zip",
    "u32_std",
    "u32_add",
    "u32_rrot",
    "u32_xor",
    "blake3",
    "winternitz",
    "winternitz_compact",
]