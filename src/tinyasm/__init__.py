"""
tinyasm - One-Pass Assembler for a Minimal Accumulator Machine
==============================================================

This package assembles programs for a small hypothetical machine with ten
instructions into a binary memory image, in a single pass over the source
and without buffering the program.

Two machines are built in:

- **m256n8**: 256 words of 8 bits; opcode and operand in separate words
- **m1024n16**: 1024 words of 16 bits; 6-bit opcode and 10-bit operand
  packed into one word

Main Components
---------------
- **assembler**: Line parser, symbol table with backpatching, memory image,
  and the Assembler driver
- **machine**: Instruction set, word layouts and machine presets
- **disassembler**: Decodes an image back into instructions
- **cli**: The `tinyasm` command

Quick Start
-----------
Assemble a program:
    >>> from tinyasm import Assembler
    >>> asm = Assembler("m256n8")
    >>> image = asm.assemble_file("count.asm")
    >>> asm.write_binary("count.bin")

Or use the command-line tool:
    $ tinyasm count.asm -m m1024n16 -o count.bin -l count.lst

Source Format
-------------
One instruction per line, fields separated by single spaces:
    L OPC OPRD
    L OPC
    OPC OPRD
    OPC
Labels are single letters; operands are decimal numbers or labels.
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from tinyasm.assembler import Assembler, MemoryImage, SymbolTable, assemble, assemble_file
from tinyasm.machine import (
    MachineConfig,
    MACHINE_PRESETS,
    DEFAULT_MACHINE,
    get_machine,
)
from tinyasm.errors import (
    TinyAsmError,
    AssemblerError,
    AssemblySyntaxError,
    MalformedLineError,
    InvalidLabelError,
    InvalidOperandLiteralError,
    DuplicateLabelError,
    UnknownMnemonicError,
    UnexpectedOperandError,
    MissingOperandError,
    OperandOverflowError,
    CapacityExceededError,
    UnresolvedSymbolError,
    MachineConfigError,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "MemoryImage",
    "SymbolTable",
    "assemble",
    "assemble_file",
    # Machines
    "MachineConfig",
    "MACHINE_PRESETS",
    "DEFAULT_MACHINE",
    "get_machine",
    # Exception hierarchy
    "TinyAsmError",
    "AssemblerError",
    "AssemblySyntaxError",
    "MalformedLineError",
    "InvalidLabelError",
    "InvalidOperandLiteralError",
    "DuplicateLabelError",
    "UnknownMnemonicError",
    "UnexpectedOperandError",
    "MissingOperandError",
    "OperandOverflowError",
    "CapacityExceededError",
    "UnresolvedSymbolError",
    "MachineConfigError",
    "SourceLocation",
]
