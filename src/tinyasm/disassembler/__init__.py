"""
tinyasm Disassembler Package
============================

Decodes assembled memory images back into instructions, for object
listings and for checking that an image round-trips through the
instruction set.

Usage:
    from tinyasm.disassembler import decode_image

    for instr in decode_image(image, end=asm.location_counter):
        print(instr)
"""

from tinyasm.disassembler.decoder import (
    DecodedInstruction,
    decode_instruction,
    decode_image,
)

__all__ = [
    "DecodedInstruction",
    "decode_instruction",
    "decode_image",
]
