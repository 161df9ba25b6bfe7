"""
Machine Configurations
======================

A MachineConfig bundles everything that varies between builds of the
target machine: the word count (M), the word width (N), the field layout
and the instruction table. These are startup constants; nothing about them
is negotiated while assembling.

Presets
-------
    m256n8      256 words x 8 bits, opcode and operand in separate words
    m1024n16    1024 words x 16 bits, 6-bit opcode + 10-bit operand packed

Usage:
    >>> from tinyasm.machine import get_machine
    >>> machine = get_machine("m1024n16")
    >>> machine.word_count, machine.word_bits
    (1024, 16)
    >>> machine.max_operand
    1023
"""

from dataclasses import dataclass, field

from tinyasm.errors import MachineConfigError
from tinyasm.machine.instructions import DEFAULT_INSTRUCTION_SET, InstructionSet
from tinyasm.machine.layout import PackedWordLayout, SplitWordLayout, WordLayout


@dataclass(frozen=True)
class MachineConfig:
    """
    Complete description of one target machine.

    Validated on construction: the layout must match the word width, the
    opcode field must hold every opcode, and the operand field must hold
    every address, since unresolved operands carry chain pointers.

    Attributes:
        name: Preset name (e.g., "m256n8")
        word_count: Number of addressable words (M)
        word_bits: Bits per word (N)
        layout: Opcode/operand field layout
        instruction_set: Mnemonic/opcode table
        description: Human-readable summary
    """
    name: str
    word_count: int
    word_bits: int
    layout: WordLayout
    instruction_set: InstructionSet = field(default=DEFAULT_INSTRUCTION_SET, compare=False)
    description: str = ""

    def __post_init__(self):
        if self.word_count <= 0:
            raise MachineConfigError(f"{self.name}: word count must be positive")
        if self.word_bits <= 0:
            raise MachineConfigError(f"{self.name}: word width must be positive")
        if self.layout.word_bits != self.word_bits:
            raise MachineConfigError(
                f"{self.name}: layout is for {self.layout.word_bits}-bit words, "
                f"machine has {self.word_bits}-bit words"
            )
        if self.instruction_set.max_opcode > self.layout.max_opcode:
            raise MachineConfigError(
                f"{self.name}: opcode {self.instruction_set.max_opcode} does not fit "
                f"a {self.layout.opcode_bits}-bit opcode field"
            )
        if self.word_count - 1 > self.layout.max_operand:
            raise MachineConfigError(
                f"{self.name}: address {self.word_count - 1} does not fit "
                f"a {self.layout.operand_bits}-bit operand field"
            )

    @property
    def max_word(self) -> int:
        return (1 << self.word_bits) - 1

    @property
    def operand_bits(self) -> int:
        return self.layout.operand_bits

    @property
    def max_operand(self) -> int:
        return self.layout.max_operand

    def instruction_words(self, has_operand: bool) -> int:
        return self.layout.instruction_words(has_operand)

    def __str__(self) -> str:
        return f"{self.name}: {self.word_count} x {self.word_bits}-bit words, {self.layout}"


# =============================================================================
# Presets
# =============================================================================

M256_N8 = MachineConfig(
    name="m256n8",
    word_count=256,
    word_bits=8,
    layout=SplitWordLayout(word_bits=8),
    description="256 words of 8 bits, opcode and operand in separate bytes",
)

M1024_N16 = MachineConfig(
    name="m1024n16",
    word_count=1024,
    word_bits=16,
    layout=PackedWordLayout(word_bits=16, opcode_bits=6),
    description="1024 words of 16 bits, 6-bit opcode and 10-bit operand in one word",
)

MACHINE_PRESETS: dict[str, MachineConfig] = {
    M256_N8.name: M256_N8,
    M1024_N16.name: M1024_N16,
}

DEFAULT_MACHINE = M256_N8.name


def get_machine(name: str) -> MachineConfig:
    """
    Look up a preset by name (case-insensitive).

    Raises:
        MachineConfigError: If no preset has that name
    """
    machine = MACHINE_PRESETS.get(name.lower())
    if machine is None:
        valid = ", ".join(sorted(MACHINE_PRESETS))
        raise MachineConfigError(f"unknown machine '{name}'. Valid machines: {valid}")
    return machine


def resolve_machine(machine: "MachineConfig | str | None") -> MachineConfig:
    """Accept a config, a preset name or None (the default preset)."""
    if machine is None:
        return MACHINE_PRESETS[DEFAULT_MACHINE]
    if isinstance(machine, MachineConfig):
        return machine
    return get_machine(machine)
