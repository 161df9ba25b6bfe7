"""
One-Pass Assembler
==================

This package assembles programs for the minimal accumulator machine into a
memory image in a single pass over the source.

Main Components
---------------
- **Assembler**: Drives the pass and owns the location counter
- **LineParser**: Splits a line into label, mnemonic and operand
- **SymbolTable**: Labels and forward-reference backpatching
- **MemoryImage**: The M-word output with layout-aware field access
- **listing**: Trace, symbol table and object listings

Forward References
------------------
A label used before its definition cannot be encoded yet. Its operand
field temporarily stores a link to the previous reference of the same
label, forming a chain headed by the symbol table entry. Defining the
label walks the chain and patches every operand in place (see
tinyasm.assembler.symbols).

Example Usage
-------------
>>> from tinyasm.assembler import Assembler
>>> asm = Assembler("m1024n16")
>>> image = asm.assemble_string("BRA E\\nE HLT")
>>> hex(image[0])
'0x1801'
"""

from tinyasm.assembler.assembler import Assembler, assemble, assemble_file
from tinyasm.assembler.listing import (
    ListingEntry,
    format_listing,
    format_object,
    format_symbol_file,
    format_symbol_table,
    format_trace,
)
from tinyasm.assembler.memory import MemoryImage
from tinyasm.assembler.parser import LineParser, ParsedLine, parse_line, tokenize_line
from tinyasm.assembler.symbols import (
    CHAIN_END,
    Symbol,
    SymbolStatus,
    SymbolTable,
    patch_chain,
    walk_chain,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Parser
    "LineParser",
    "ParsedLine",
    "parse_line",
    "tokenize_line",
    # Symbols
    "CHAIN_END",
    "Symbol",
    "SymbolStatus",
    "SymbolTable",
    "patch_chain",
    "walk_chain",
    # Memory
    "MemoryImage",
    # Listings
    "ListingEntry",
    "format_listing",
    "format_object",
    "format_symbol_file",
    "format_symbol_table",
    "format_trace",
]
