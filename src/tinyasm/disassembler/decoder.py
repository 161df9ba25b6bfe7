"""
Memory Image Decoder
====================

Turns an assembled memory image back into (opcode, mnemonic, operand)
records. This is the inverse of the assembler's encode step and uses the
same WordLayout, so it works for split and packed machines alike.

Usage:
    image = assemble("LOD 5\\nHLT")
    for instr in decode_image(image, end=3):
        print(instr)

Words whose opcode field is not assigned to any instruction decode as
one-word DATA entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tinyasm.assembler.memory import MemoryImage


@dataclass
class DecodedInstruction:
    """
    One decoded instruction.

    Attributes:
        address: Address of the instruction's first word
        opcode: Opcode field value
        mnemonic: Mnemonic, or "DATA" for an unknown opcode
        operand: Operand field value, None if the instruction has none
        size: Number of words occupied
        words: Raw words of the instruction
        comment: Optional note (e.g., "unknown opcode")
    """
    address: int
    opcode: int
    mnemonic: str
    operand: Optional[int]
    size: int
    words: tuple[int, ...]
    comment: str = ""

    def __str__(self) -> str:
        asm = self.mnemonic if self.operand is None else f"{self.mnemonic} {self.operand}"
        if self.comment:
            return f"{self.address:4d}: {asm:<10} ; {self.comment}"
        return f"{self.address:4d}: {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": self.address,
            "opcode": self.opcode,
            "mnemonic": self.mnemonic,
            "operand": self.operand,
            "size": self.size,
            "words": list(self.words),
            "comment": self.comment,
        }


def decode_instruction(image: MemoryImage, address: int) -> DecodedInstruction:
    """Decode the instruction starting at address."""
    machine = image.machine
    opcode = image.read_opcode_field(address)
    info = machine.instruction_set.by_opcode(opcode)

    if info is None:
        word = image.read(address)
        return DecodedInstruction(
            address, opcode, "DATA", word, 1, (word,), comment="unknown opcode"
        )

    size = machine.instruction_words(info.has_operand)
    if address + size > len(image):
        word = image.read(address)
        return DecodedInstruction(
            address, opcode, "DATA", word, 1, (word,), comment="truncated instruction"
        )

    operand = image.read_operand_field(address) if info.has_operand else None
    words = tuple(image.read(a) for a in range(address, address + size))
    return DecodedInstruction(address, opcode, info.mnemonic, operand, size, words)


def decode_image(image: MemoryImage, end: Optional[int] = None) -> list[DecodedInstruction]:
    """
    Decode instructions from address 0.

    Args:
        image: The memory image
        end: Address to stop at (exclusive). When omitted, decoding covers
             every non-zero word plus the instruction right after them,
             which shows a trailing HLT (opcode 0).

    Returns:
        Decoded instructions in address order
    """
    instructions = []
    address = 0

    if end is None:
        last_used = image.last_used_address()
        while address <= last_used:
            instr = decode_instruction(image, address)
            instructions.append(instr)
            address += instr.size
        if address < len(image):
            instructions.append(decode_instruction(image, address))
        return instructions

    end = min(end, len(image))
    while address < end:
        instr = decode_instruction(image, address)
        instructions.append(instr)
        address += instr.size
    return instructions
