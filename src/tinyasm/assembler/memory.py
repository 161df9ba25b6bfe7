"""
Memory Image
============

The assembler's output: a fixed array of M words of N bits, addressed
0..M-1, allocated zero-filled once per run and mutated in place.

Word-level access (read/write) works on raw words. Field-level access
(encode, read_opcode_field, read_operand_field, write_operand_field) goes
through the machine's WordLayout, so the same calls work whether an
instruction spans two narrow words or shares one wide word.

Example:
    >>> from tinyasm.machine import M1024_N16
    >>> image = MemoryImage(M1024_N16)
    >>> image.encode(0, opcode=1, operand=0, takes_operand=True)
    >>> image.write_operand_field(0, 7)
    >>> image.read_opcode_field(0), image.read_operand_field(0)
    (1, 7)
"""

from typing import Iterator

from tinyasm.errors import OperandOverflowError
from tinyasm.machine.config import MachineConfig


class MemoryImage:
    """
    M words of N bits with layout-aware field access.

    Attributes:
        machine: The machine configuration the image belongs to
    """

    def __init__(self, machine: MachineConfig):
        self.machine = machine
        self._layout = machine.layout
        self._words = [0] * machine.word_count

    # =========================================================================
    # Word Access
    # =========================================================================

    def read(self, address: int) -> int:
        """Read the raw word at address."""
        self._check_address(address)
        return self._words[address]

    def write(self, address: int, value: int) -> None:
        """
        Write a raw word.

        Raises:
            IndexError: If the address is outside 0..M-1
            ValueError: If the value does not fit in N bits
        """
        self._check_address(address)
        if not 0 <= value <= self.machine.max_word:
            raise ValueError(
                f"value {value} does not fit a {self.machine.word_bits}-bit word"
            )
        self._words[address] = value

    # =========================================================================
    # Field Access
    # =========================================================================

    def encode(self, address: int, opcode: int, operand: int, takes_operand: bool) -> None:
        """
        Write an instruction at address according to the layout.

        The caller owns the location counter; encode never advances it.
        """
        size = self._layout.instruction_words(takes_operand)
        self._check_address(address)
        self._check_address(address + size - 1)
        self._layout.encode(self._words, address, opcode, operand, takes_operand)

    def read_opcode_field(self, address: int) -> int:
        self._check_address(address)
        return self._layout.read_opcode(self._words, address)

    def read_operand_field(self, address: int) -> int:
        """Return the operand field of the instruction starting at address."""
        self._check_operand_address(address)
        return self._layout.read_operand(self._words, address)

    def write_operand_field(self, address: int, value: int) -> None:
        """
        Overwrite the operand field of the instruction starting at address.

        Only the operand bits change; the opcode bits are preserved even
        when both fields share one word.
        """
        self._check_operand_address(address)
        self.check_operand(value)
        self._layout.write_operand(self._words, address, value)

    def check_operand(self, value: int) -> int:
        """
        Range-check an operand against the operand field width.

        Returns:
            The value, unchanged

        Raises:
            OperandOverflowError: If value > 2**operand_bits - 1
        """
        if value < 0:
            raise ValueError(f"operand {value} is negative")
        if value > self._layout.max_operand:
            raise OperandOverflowError(value, self._layout.operand_bits)
        return value

    # =========================================================================
    # Output
    # =========================================================================

    @property
    def bytes_per_word(self) -> int:
        return (self.machine.word_bits + 7) // 8

    def to_bytes(self) -> bytes:
        """Serialise all M words, big-endian, ceil(N/8) bytes per word."""
        width = self.bytes_per_word
        return b"".join(word.to_bytes(width, "big") for word in self._words)

    @property
    def words(self) -> tuple[int, ...]:
        return tuple(self._words)

    def last_used_address(self) -> int:
        """Address of the last non-zero word, or -1 for an empty image."""
        for address in range(len(self._words) - 1, -1, -1):
            if self._words[address]:
                return address
        return -1

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_address(self, address: int) -> None:
        if not 0 <= address < len(self._words):
            raise IndexError(
                f"address {address} outside memory (0..{len(self._words) - 1})"
            )

    def _check_operand_address(self, address: int) -> None:
        self._check_address(address)
        self._check_address(address + self._layout.instruction_words(True) - 1)

    def __getitem__(self, address: int) -> int:
        return self.read(address)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[int]:
        return iter(self._words)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MemoryImage):
            return NotImplemented
        return self.machine == other.machine and self._words == other._words

    def __repr__(self) -> str:
        return f"MemoryImage({self.machine.name}, used={self.last_used_address() + 1})"
