"""
tinyasm Error Hierarchy
=======================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from TinyAsmError, allowing callers to catch every
tinyasm-related error with a single except clause if desired.

Exception Hierarchy
-------------------
TinyAsmError (base)
├── AssemblerError (assembly of a source program)
│   ├── AssemblySyntaxError - source line does not fit the grammar
│   │   ├── MalformedLineError - none of the four line shapes matched
│   │   ├── InvalidLabelError - label is not a single letter
│   │   └── InvalidOperandLiteralError - operand is neither number nor symbol
│   ├── DuplicateLabelError - label defined twice
│   ├── UnknownMnemonicError - mnemonic not in the instruction set
│   ├── UnexpectedOperandError - operand given to a no-operand mnemonic
│   ├── MissingOperandError - operand missing for an operand mnemonic
│   ├── OperandOverflowError - literal does not fit the operand field
│   ├── CapacityExceededError - program does not fit in memory
│   └── UnresolvedSymbolError - symbol referenced but never defined
└── MachineConfigError (invalid machine description)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Assembly is fail-fast: the first error raised aborts the run and no output
artifact is produced.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class TinyAsmError(Exception):
    """
    Base exception for all tinyasm errors.

    Catch this to handle every failure the package can raise:

        try:
            assembler.assemble_file("program.asm")
        except TinyAsmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(TinyAsmError):
    """
    Base exception for all assembly errors.

    Components below the driver (instruction set, memory image, symbol
    table) raise these without a location; the driver attaches the file,
    line and source text through locate() before the error propagates.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def locate(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "AssemblerError":
        """
        Attach a source location to an error raised without one.

        An existing location is kept. Returns self so the caller can
        re-raise in one statement.
        """
        if self.location is None:
            self.location = location
        if self.source_line is None:
            self.source_line = source_line
        self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:3:5: error: operand 300 exceeds max value of 255
                LOD 300
                    ^
            hint: the operand field is 8 bits wide
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    A source line does not fit the line grammar.

    Subclasses name the specific failure; catch this class to handle all
    lexical and shape errors together.
    """
    pass


class MalformedLineError(AssemblySyntaxError):
    """
    None of the four accepted line shapes matched.

    Valid shapes are:
        L OPC OPRD
        L OPC
        OPC OPRD
        OPC
    """

    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        super().__init__(
            f"cannot parse line '{text}'",
            location=location,
            hint="expected 'L OPC OPRD', 'L OPC', 'OPC OPRD' or 'OPC', "
                 "fields separated by single spaces",
        )


class InvalidLabelError(AssemblySyntaxError):
    """A label token is not a single alphabetic character."""

    def __init__(self, label: str, location: Optional[SourceLocation] = None):
        self.label = label
        super().__init__(
            f"symbol must be a letter, got '{label}'",
            location=location,
        )


class InvalidOperandLiteralError(AssemblySyntaxError):
    """
    Operand text is neither a decimal literal nor a symbol.

    Symbols are single letters; literals are non-negative decimal integers.
    """

    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        if text[:1].isalpha():
            hint = "symbol references are a single letter"
        else:
            hint = "numeric operands are non-negative decimal integers"
        super().__init__(
            f"cannot convert operand '{text}' to an integer or symbol",
            location=location,
            hint=hint,
        )


class DuplicateLabelError(AssemblerError):
    """
    Label defined more than once.

    Includes the location of the original definition when known. Raising
    this error leaves the symbol table and memory image untouched.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"label '{symbol}' is doubly defined",
            location=location,
            hint=hint,
        )


class UnknownMnemonicError(AssemblerError):
    """Mnemonic not present in the active instruction set."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        valid_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.valid_mnemonics = valid_mnemonics or []

        hint = None
        if self.valid_mnemonics:
            hint = f"valid mnemonics: {', '.join(self.valid_mnemonics)}"

        super().__init__(
            f"unknown mnemonic '{mnemonic}'",
            location=location,
            hint=hint,
        )


class UnexpectedOperandError(AssemblerError):
    """An operand was given to a mnemonic that takes none."""

    def __init__(
        self,
        mnemonic: str,
        operand: str,
        location: Optional[SourceLocation] = None,
    ):
        self.mnemonic = mnemonic
        self.operand = operand
        super().__init__(
            f"'{mnemonic}' should not have an operand (got '{operand}')",
            location=location,
        )


class MissingOperandError(AssemblerError):
    """A mnemonic that takes an operand was given none."""

    def __init__(self, mnemonic: str, location: Optional[SourceLocation] = None):
        self.mnemonic = mnemonic
        super().__init__(
            f"'{mnemonic}' requires an operand",
            location=location,
        )


class OperandOverflowError(AssemblerError):
    """
    Numeric operand does not fit the operand field.

    The largest accepted literal is 2**field_bits - 1. Literals too long
    to convert are reported with their source text as the value.
    """

    def __init__(
        self,
        value: int | str,
        field_bits: int,
        location: Optional[SourceLocation] = None,
    ):
        self.value = value
        self.field_bits = field_bits
        self.max_value = (1 << field_bits) - 1
        super().__init__(
            f"operand {value} exceeds max value of {self.max_value}",
            location=location,
            hint=f"the operand field is {field_bits} bits wide",
        )


class CapacityExceededError(AssemblerError):
    """The next instruction would run past the end of memory."""

    def __init__(
        self,
        address: int,
        size: int,
        word_count: int,
        location: Optional[SourceLocation] = None,
    ):
        self.address = address
        self.size = size
        self.word_count = word_count
        super().__init__(
            f"program does not fit in memory: {size}-word instruction at "
            f"address {address} exceeds {word_count} words",
            location=location,
        )


class UnresolvedSymbolError(AssemblerError):
    """
    Symbol referenced but never defined.

    Raised at the end of the pass. The reference sites are the addresses
    of the instructions still holding forward-reference links.
    """

    def __init__(
        self,
        symbol: str,
        sites: Optional[list[int]] = None,
        location: Optional[SourceLocation] = None,
    ):
        self.symbol = symbol
        self.sites = sites or []

        hint = None
        if self.sites:
            addresses = ", ".join(str(site) for site in self.sites)
            hint = f"referenced by the instructions at {addresses}"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
        )


# =============================================================================
# Machine Configuration Exceptions
# =============================================================================

class MachineConfigError(TinyAsmError):
    """
    Invalid machine description.

    Raised for unknown preset names and for word/field widths that cannot
    hold the machine's opcodes or addresses.
    """
    pass
