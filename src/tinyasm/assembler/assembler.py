"""
One-Pass Assembler - Main Interface
===================================

The Assembler drives a single left-to-right pass over the source lines.
For each line it:

1. Parses the line into (label, mnemonic, operand)
2. Looks up the mnemonic and checks operand presence
3. Checks the instruction fits in the remaining memory
4. Defines the label at the current location counter, resolving any
   forward references to it
5. Resolves the operand: a letter is a symbol reference, anything else a
   decimal literal checked against the operand field width
6. Encodes the instruction and advances the location counter

The first error aborts the run. After the last line, any symbol that was
referenced but never defined raises UnresolvedSymbolError unless the
assembler was created with allow_unresolved=True.

Example Usage
-------------
>>> from tinyasm.assembler import Assembler
>>> asm = Assembler("m256n8")
>>> image = asm.assemble_string('''
... A LOD B
...   STO A
... B HLT
... ''')
>>> image.words[:5]
(1, 4, 2, 0, 0)
>>> asm.get_symbols()
{'A': 0, 'B': 4}

Each assemble_* call starts from a fresh memory image, symbol table and
location counter; nothing carries over between runs.
"""

import logging
from pathlib import Path
from typing import Iterable

from tinyasm.assembler.listing import ListingEntry, format_listing, format_symbol_file
from tinyasm.assembler.memory import MemoryImage
from tinyasm.assembler.parser import LineParser, ParsedLine
from tinyasm.assembler.symbols import SymbolTable
from tinyasm.errors import (
    AssemblerError,
    CapacityExceededError,
    InvalidLabelError,
    InvalidOperandLiteralError,
    OperandOverflowError,
    SourceLocation,
    UnresolvedSymbolError,
)
from tinyasm.machine.config import MachineConfig, resolve_machine

# Logger for this module
logger = logging.getLogger(__name__)


class Assembler:
    """
    Single-pass assembler for the configured machine.

    Attributes:
        machine: Target machine configuration
        allow_unresolved: If True, symbols left undefined at the end of
            the pass keep their dangling chains instead of failing
    """

    def __init__(
        self,
        machine: MachineConfig | str | None = None,
        allow_unresolved: bool = False,
    ):
        """
        Initialize the assembler.

        Args:
            machine: A MachineConfig, a preset name, or None for the default
            allow_unresolved: Skip the end-of-pass undefined symbol check
        """
        self.machine = resolve_machine(machine)
        self.allow_unresolved = allow_unresolved
        self._parser = LineParser()
        self._reset()

    def _reset(self) -> None:
        self._image = MemoryImage(self.machine)
        self._symbols = SymbolTable(self._image)
        self._location_counter = 0
        self._listing: list[ListingEntry] = []
        self._assembled = False

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str], filename: str = "<input>") -> MemoryImage:
        """
        Assemble a sequence of source lines.

        Blank lines are skipped; line numbers in diagnostics still count
        them.

        Returns:
            The assembled memory image

        Raises:
            AssemblerError: On the first error in the source
        """
        self._reset()

        for line_number, raw in enumerate(lines, start=1):
            text = raw.strip()
            if not text:
                continue

            location = SourceLocation(filename, line_number)
            try:
                parsed = self._parser.parse(text)
            except InvalidLabelError as err:
                raise err.locate(self._at(location, 1), text)
            except AssemblerError as err:
                raise err.locate(location, text)

            try:
                self._assemble_instruction(parsed, location)
            except AssemblerError as err:
                raise err.locate(location, parsed.text)

        self._check_unresolved()
        self._assembled = True
        logger.info(
            f"Assembled {self._location_counter} words, "
            f"{len(self._symbols)} symbols ({self.machine.name})"
        )
        return self._image

    def assemble_string(self, source: str, filename: str = "<input>") -> MemoryImage:
        """Assemble source code held in a string."""
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> MemoryImage:
        """
        Assemble a source file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If the file does not exist
        """
        filepath = Path(filepath)
        logger.debug(f"Assembling {filepath}")

        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    def _assemble_instruction(self, parsed: ParsedLine, location: SourceLocation) -> None:
        """Steps 2-6 for one parsed line."""
        instruction_set = self.machine.instruction_set
        address = self._location_counter

        try:
            info = instruction_set.lookup(parsed.mnemonic)
        except AssemblerError as err:
            raise err.locate(self._at(location, parsed.mnemonic_column))

        try:
            instruction_set.check_operand(info, parsed.operand)
        except AssemblerError as err:
            raise err.locate(self._at(location, parsed.operand_column or parsed.mnemonic_column))

        size = self.machine.instruction_words(info.has_operand)
        if address + size > self.machine.word_count:
            raise CapacityExceededError(address, size, self.machine.word_count)

        if parsed.label is not None:
            self._symbols.define(
                parsed.label, address, self._at(location, parsed.label_column)
            )

        operand = 0
        if info.has_operand:
            try:
                operand = self._resolve_operand(parsed.operand, address)
            except AssemblerError as err:
                raise err.locate(self._at(location, parsed.operand_column))

        self._image.encode(address, info.opcode, operand, info.has_operand)
        self._listing.append(ListingEntry(
            address=address,
            line_number=location.line,
            label=parsed.label,
            source=parsed.text[parsed.mnemonic_column - 1:],
            mnemonic=info.mnemonic,
            opcode=info.opcode,
            operand=operand if info.has_operand else None,
        ))
        logger.debug(f"{address:4d}: {parsed.text}")
        self._location_counter += size

    def _resolve_operand(self, text: str, address: int) -> int:
        """
        Turn operand text into the value to encode.

        A leading letter makes the operand a symbol reference; the
        result may be a chain link rather than an address until the
        symbol is defined.
        """
        if text[0].isalpha():
            if len(text) != 1:
                raise InvalidOperandLiteralError(text)
            return self._symbols.reference(text, address)

        if not (text.isascii() and text.isdigit()):
            raise InvalidOperandLiteralError(text)
        if len(text.lstrip("0")) > len(str(self.machine.max_operand)):
            raise OperandOverflowError(text, self.machine.operand_bits)
        return self._image.check_operand(int(text))

    def _check_unresolved(self) -> None:
        for symbol in self._symbols.unresolved():
            sites = self._symbols.unresolved_sites(symbol.name)
            if self.allow_unresolved:
                logger.warning(
                    f"Symbol '{symbol.name}' is undefined; "
                    f"{len(sites)} reference(s) left unresolved"
                )
                continue
            raise UnresolvedSymbolError(symbol.name, sites=sites)

    @staticmethod
    def _at(location: SourceLocation, column: int) -> SourceLocation:
        return SourceLocation(location.filename, location.line, column)

    # =========================================================================
    # Output Methods
    # =========================================================================

    @property
    def image(self) -> MemoryImage:
        return self._image

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    @property
    def location_counter(self) -> int:
        return self._location_counter

    def get_code(self) -> bytes:
        """Return the full memory image as bytes."""
        return self._image.to_bytes()

    def get_symbols(self) -> dict[str, int]:
        """Return the defined symbols as name -> address."""
        return self._symbols.resolved()

    def get_listing_entries(self) -> list[ListingEntry]:
        return list(self._listing)

    def get_listing(self) -> str:
        """Return the first-pass trace, symbol table and object listing."""
        return format_listing(
            self._listing, self._symbols, self._image, end=self._location_counter
        )

    def write_binary(self, filepath: str | Path) -> None:
        """Write the raw memory image (M words, big-endian)."""
        self._require_output()
        Path(filepath).write_bytes(self.get_code())
        logger.debug(f"Wrote {len(self._image)} words to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        self._require_output()
        Path(filepath).write_text(self.get_listing() + "\n")

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the symbol table, one 'name address status' line each."""
        self._require_output()
        Path(filepath).write_text(format_symbol_file(self._symbols))

    def _require_output(self) -> None:
        if not self._assembled:
            raise AssemblerError("no successful assembly to write")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(
    source: str,
    machine: MachineConfig | str | None = None,
    filename: str = "<input>",
    allow_unresolved: bool = False,
) -> MemoryImage:
    """
    Assemble source code held in a string.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(machine, allow_unresolved=allow_unresolved)
    return asm.assemble_string(source, filename)


def assemble_file(
    filepath: str | Path,
    machine: MachineConfig | str | None = None,
    allow_unresolved: bool = False,
) -> MemoryImage:
    """
    Assemble a source file.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(machine, allow_unresolved=allow_unresolved)
    return asm.assemble_file(filepath)
