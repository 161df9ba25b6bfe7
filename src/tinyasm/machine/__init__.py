"""
tinyasm Machine Package
=======================

Definitions of the target machine shared by the assembler and the
disassembler: the instruction table, the word layouts, and the machine
presets combining them.

Modules:
    instructions: Mnemonic/opcode table and lookup
    layout: Opcode/operand field layouts (split and packed)
    config: MachineConfig and the named presets

Usage:
    from tinyasm.machine import get_machine, DEFAULT_INSTRUCTION_SET
"""

from tinyasm.machine.instructions import (
    InstructionInfo,
    InstructionSet,
    INSTRUCTION_TABLE,
    DEFAULT_INSTRUCTION_SET,
)
from tinyasm.machine.layout import (
    WordLayout,
    SplitWordLayout,
    PackedWordLayout,
)
from tinyasm.machine.config import (
    MachineConfig,
    M256_N8,
    M1024_N16,
    MACHINE_PRESETS,
    DEFAULT_MACHINE,
    get_machine,
    resolve_machine,
)

__all__ = [
    # Instruction set
    "InstructionInfo",
    "InstructionSet",
    "INSTRUCTION_TABLE",
    "DEFAULT_INSTRUCTION_SET",
    # Layouts
    "WordLayout",
    "SplitWordLayout",
    "PackedWordLayout",
    # Machine configuration
    "MachineConfig",
    "M256_N8",
    "M1024_N16",
    "MACHINE_PRESETS",
    "DEFAULT_MACHINE",
    "get_machine",
    "resolve_machine",
]
