"""
Instruction Set Definition
==========================

The target machine understands ten instructions. Each mnemonic is exactly
three characters and maps one-to-one to an opcode. Six instructions take an
operand (a memory address or a literal); the rest take none.

    Opcode  Mnemonic  Operand  Meaning
    ------  --------  -------  ---------------------------------
    0       HLT       no       Halt
    1       LOD       yes      Load accumulator from memory
    2       STO       yes      Store accumulator to memory
    3       ADD       yes      Add memory to accumulator
    4       BZE       yes      Branch if accumulator is zero
    5       BNE       yes      Branch if accumulator is not zero
    6       BRA       yes      Branch always
    7       INP       no       Read input into accumulator
    8       OUT       no       Write accumulator to output
    9       CLA       no       Clear accumulator

Mnemonics are matched case-sensitively.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from tinyasm.errors import (
    MachineConfigError,
    MissingOperandError,
    UnexpectedOperandError,
    UnknownMnemonicError,
)


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    One entry of the instruction table.

    Frozen so the shared table cannot be modified at runtime.

    Attributes:
        mnemonic: Three-letter mnemonic (e.g., "LOD")
        opcode: Numeric opcode stored in the opcode field
        has_operand: True if the instruction carries an operand field
        description: Short human-readable description
    """
    mnemonic: str
    opcode: int
    has_operand: bool
    description: str = ""

    def __repr__(self) -> str:
        return (
            f"InstructionInfo({self.mnemonic}, opcode={self.opcode}, "
            f"has_operand={self.has_operand})"
        )


# =============================================================================
# Opcode Table
# =============================================================================

INSTRUCTION_TABLE: dict[str, InstructionInfo] = {
    "HLT": InstructionInfo("HLT", 0, False, "Halt"),
    "LOD": InstructionInfo("LOD", 1, True, "Load accumulator"),
    "STO": InstructionInfo("STO", 2, True, "Store accumulator"),
    "ADD": InstructionInfo("ADD", 3, True, "Add to accumulator"),
    "BZE": InstructionInfo("BZE", 4, True, "Branch if zero"),
    "BNE": InstructionInfo("BNE", 5, True, "Branch if not zero"),
    "BRA": InstructionInfo("BRA", 6, True, "Branch always"),
    "INP": InstructionInfo("INP", 7, False, "Input to accumulator"),
    "OUT": InstructionInfo("OUT", 8, False, "Output accumulator"),
    "CLA": InstructionInfo("CLA", 9, False, "Clear accumulator"),
}


# =============================================================================
# Instruction Set
# =============================================================================

class InstructionSet:
    """
    Immutable mnemonic/opcode lookup.

    Wraps a table of InstructionInfo entries and builds the reverse
    (opcode -> entry) index used when decoding a memory image.
    """

    def __init__(self, table: Optional[dict[str, InstructionInfo]] = None):
        self._table = dict(table if table is not None else INSTRUCTION_TABLE)
        self._by_opcode = {info.opcode: info for info in self._table.values()}
        if len(self._by_opcode) != len(self._table):
            raise MachineConfigError("instruction table maps two mnemonics to one opcode")

    def lookup(self, mnemonic: str) -> InstructionInfo:
        """
        Look up an instruction by mnemonic.

        Raises:
            UnknownMnemonicError: If the mnemonic is not in the table
        """
        info = self._table.get(mnemonic)
        if info is None:
            raise UnknownMnemonicError(mnemonic, valid_mnemonics=self.mnemonics())
        return info

    def by_opcode(self, opcode: int) -> Optional[InstructionInfo]:
        """Return the entry for an opcode, or None if it is not assigned."""
        return self._by_opcode.get(opcode)

    def check_operand(self, info: InstructionInfo, operand: Optional[str]) -> None:
        """
        Verify operand presence against the instruction's signature.

        Raises:
            UnexpectedOperandError: Operand text given to a no-operand mnemonic
            MissingOperandError: No operand given to an operand mnemonic
        """
        if not info.has_operand and operand:
            raise UnexpectedOperandError(info.mnemonic, operand)
        if info.has_operand and not operand:
            raise MissingOperandError(info.mnemonic)

    def mnemonics(self) -> list[str]:
        """Mnemonics in opcode order."""
        return [info.mnemonic for info in sorted(self._table.values(), key=lambda i: i.opcode)]

    @property
    def max_opcode(self) -> int:
        return max(self._by_opcode)

    def __contains__(self, mnemonic: str) -> bool:
        return mnemonic in self._table

    def __iter__(self) -> Iterator[InstructionInfo]:
        return iter(sorted(self._table.values(), key=lambda i: i.opcode))

    def __len__(self) -> int:
        return len(self._table)


DEFAULT_INSTRUCTION_SET = InstructionSet()
