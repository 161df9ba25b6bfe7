"""
Word Layouts
============

A layout decides where an instruction's opcode and operand fields live in
memory. Two strategies cover the known machines:

SplitWordLayout
    The opcode occupies one word and the operand the following word.
    Instructions without an operand take a single word.

        address     address+1
        [ opcode ]  [ operand ]

PackedWordLayout
    Opcode and operand share one word: the opcode in the high bits, the
    operand in the low bits. Every instruction takes exactly one word.

        15       10 9                 0
        [ opcode  | operand          ]

All field accessors take the *instruction* address, the address of the
instruction's first word. Forward-reference chains store instruction
addresses, so a layout is all the backpatch walk needs to find the operand
field of each chain node.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import MutableSequence

from tinyasm.errors import MachineConfigError


class WordLayout(ABC):
    """
    Field-layout strategy shared by MemoryImage and the decoder.

    Attributes:
        word_bits: Width of one memory word
        opcode_bits: Width of the opcode field
        operand_bits: Width of the operand field
    """

    word_bits: int
    opcode_bits: int
    operand_bits: int

    @property
    def operand_mask(self) -> int:
        return (1 << self.operand_bits) - 1

    @property
    def max_operand(self) -> int:
        return self.operand_mask

    @property
    def max_opcode(self) -> int:
        return (1 << self.opcode_bits) - 1

    @abstractmethod
    def instruction_words(self, has_operand: bool) -> int:
        """Number of words an instruction occupies."""

    @abstractmethod
    def encode(
        self,
        words: MutableSequence[int],
        address: int,
        opcode: int,
        operand: int,
        has_operand: bool,
    ) -> None:
        """Write an instruction at address."""

    @abstractmethod
    def read_opcode(self, words: MutableSequence[int], address: int) -> int:
        """Return the opcode field of the instruction at address."""

    @abstractmethod
    def read_operand(self, words: MutableSequence[int], address: int) -> int:
        """Return the operand field of the instruction at address."""

    @abstractmethod
    def write_operand(self, words: MutableSequence[int], address: int, value: int) -> None:
        """Replace only the operand field of the instruction at address."""


@dataclass(frozen=True)
class SplitWordLayout(WordLayout):
    """Opcode and operand in consecutive words of equal width."""

    word_bits: int = 8

    @property
    def opcode_bits(self) -> int:
        return self.word_bits

    @property
    def operand_bits(self) -> int:
        return self.word_bits

    def instruction_words(self, has_operand: bool) -> int:
        return 2 if has_operand else 1

    def encode(self, words, address, opcode, operand, has_operand):
        words[address] = opcode
        if has_operand:
            words[address + 1] = operand

    def read_opcode(self, words, address):
        return words[address]

    def read_operand(self, words, address):
        return words[address + 1]

    def write_operand(self, words, address, value):
        words[address + 1] = value & self.operand_mask

    def __str__(self) -> str:
        return f"split ({self.word_bits}-bit opcode word + {self.word_bits}-bit operand word)"


@dataclass(frozen=True)
class PackedWordLayout(WordLayout):
    """Opcode in the high bits and operand in the low bits of one word."""

    word_bits: int = 16
    opcode_bits: int = 6

    def __post_init__(self):
        if not 0 < self.opcode_bits < self.word_bits:
            raise MachineConfigError(
                f"opcode field of {self.opcode_bits} bits does not fit "
                f"a {self.word_bits}-bit word with room for an operand"
            )

    @property
    def operand_bits(self) -> int:
        return self.word_bits - self.opcode_bits

    def instruction_words(self, has_operand: bool) -> int:
        return 1

    def encode(self, words, address, opcode, operand, has_operand):
        value = opcode << self.operand_bits
        if has_operand:
            value |= operand & self.operand_mask
        words[address] = value

    def read_opcode(self, words, address):
        return words[address] >> self.operand_bits

    def read_operand(self, words, address):
        return words[address] & self.operand_mask

    def write_operand(self, words, address, value):
        # Opcode bits must survive the patch.
        words[address] = (words[address] & ~self.operand_mask) | (value & self.operand_mask)

    def __str__(self) -> str:
        return f"packed ({self.opcode_bits}-bit opcode | {self.operand_bits}-bit operand)"
