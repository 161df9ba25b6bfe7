"""
Assembly Listings
=================

Human-readable views of an assembly run:

- The first-pass trace: one row per source line with the words as they
  were encoded at that moment. Forward references still show their chain
  links here, which makes the backpatch mechanism visible.
- The symbol table: name, address (or chain head) and D/U status.
- The object listing: the final image decoded instruction by instruction.

Example (m256n8):

    First pass (labels unresolved)
    ------------------------------------------------------------
      LC  Label  Source        Opcode    Operand
       0  A      LOD B         00000001  00000000
       2         STO A         00000010  00000000
       4  B      HLT           00000000

    Symbol table
    ------------------------------------------------------------
    A        0  D
    B        4  D
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from tinyasm.disassembler.decoder import decode_image

if TYPE_CHECKING:
    from tinyasm.assembler.memory import MemoryImage
    from tinyasm.assembler.symbols import SymbolTable
    from tinyasm.machine.config import MachineConfig

RULE = "-" * 60


@dataclass(frozen=True)
class ListingEntry:
    """
    One assembled source line.

    Attributes:
        address: Location counter before the line was assembled
        line_number: Source line number (1-indexed)
        label: Label defined on the line, if any
        source: Source text without the label
        mnemonic: Instruction mnemonic
        opcode: Encoded opcode
        operand: Operand as encoded (a chain link for forward references),
                 None for instructions without one
    """
    address: int
    line_number: int
    label: Optional[str]
    source: str
    mnemonic: str
    opcode: int
    operand: Optional[int]


def format_trace(entries: list[ListingEntry], machine: MachineConfig) -> str:
    opcode_bits = machine.layout.opcode_bits
    operand_bits = machine.layout.operand_bits

    lines = ["First pass (labels unresolved)", RULE]
    lines.append(f"{'LC':>4}  {'Label':<5}  {'Source':<12}  {'Opcode':<{opcode_bits}}  Operand")
    for entry in entries:
        row = (
            f"{entry.address:4d}  {entry.label or '':<5}  {entry.source:<12}  "
            f"{entry.opcode:0{opcode_bits}b}"
        )
        if entry.operand is not None:
            row += f"  {entry.operand:0{operand_bits}b}"
        lines.append(row.rstrip())
    return "\n".join(lines)


def format_symbol_table(symbols: SymbolTable) -> str:
    lines = ["Symbol table", RULE]
    for name, slot, status in symbols.entries():
        lines.append(f"{name:<5} {slot:4d}  {status}")
    return "\n".join(lines)


def format_object(image: MemoryImage, end: Optional[int] = None) -> str:
    """
    Decode the image into an object listing.

    Each row shows the address, the raw words in binary, and the decoded
    mnemonic and operand.
    """
    word_bits = image.machine.word_bits
    lines = ["Assembled object", RULE]
    for instr in decode_image(image, end=end):
        words = " ".join(f"{word:0{word_bits}b}" for word in instr.words)
        asm = instr.mnemonic if instr.operand is None else f"{instr.mnemonic} {instr.operand}"
        row = f"{instr.address:4d}  {words:<{2 * word_bits + 1}}  {asm}"
        if instr.comment:
            row += f"  ; {instr.comment}"
        lines.append(row)
    return "\n".join(lines)


def format_listing(
    entries: list[ListingEntry],
    symbols: SymbolTable,
    image: MemoryImage,
    end: Optional[int] = None,
) -> str:
    """All three sections, separated by blank lines."""
    return "\n\n".join([
        format_trace(entries, image.machine),
        format_symbol_table(symbols),
        format_object(image, end=end),
    ])


def format_symbol_file(symbols: SymbolTable) -> str:
    """
    Symbol file contents.

    Format: name address status (one per line)
    """
    lines = ["# Symbol table", "# Generated by tinyasm"]
    for name, slot, status in symbols.entries():
        lines.append(f"{name} {slot} {status}")
    return "\n".join(lines) + "\n"
