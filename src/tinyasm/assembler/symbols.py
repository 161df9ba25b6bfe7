"""
Symbol Table and Backpatching
=============================

A one-pass assembler meets labels before it knows their addresses. Instead
of buffering the program or making a second pass, every unresolved
reference is threaded into a linked list that lives in the memory image
itself:

- The symbol's slot holds the address of the most recent instruction that
  referenced it (the chain head).
- That instruction's operand field holds the address of the previous
  referencing instruction, and so on.
- The oldest reference (the tail) holds 0, the terminator.

When the label is finally defined, the chain is walked from the head and
each operand field is overwritten with the real address. Resolution costs
one visit per forward reference and needs no storage outside the image.

Example (split 8-bit layout):

    2: LOD B     [1, 0]      B.slot = 2   (first reference, tail)
    4: ADD B     [3, 2]      B.slot = 4   (links to 2)
    6: B HLT     [0]         walk 4 -> 2, patch both operands to 6

Address 0 is both the terminator and a real instruction address. An
instruction at address 0 can only ever be the tail of a chain, so a chain
whose tail is 0 is walked past the link 0 down to node 0 itself. The symbol
table records each chain's tail so the walk knows which case applies.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from tinyasm.assembler.memory import MemoryImage
from tinyasm.errors import AssemblerError, DuplicateLabelError, SourceLocation

# Logger for this module
logger = logging.getLogger(__name__)

# Operand value terminating a forward-reference chain
CHAIN_END = 0


class SymbolStatus(Enum):
    """Resolution status, shown as D/U in listings."""
    DEFINED = "D"
    UNDEFINED = "U"

    def __str__(self) -> str:
        return self.value


@dataclass
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Single-letter label
        slot: Resolved address when DEFINED; chain head when UNDEFINED
        status: DEFINED or UNDEFINED
        location: Where the label was defined (None until defined)
        tail: Oldest pending reference while UNDEFINED, None otherwise
        references: Number of operands that referenced the symbol
    """
    name: str
    slot: int
    status: SymbolStatus
    location: Optional[SourceLocation] = None
    tail: Optional[int] = None
    references: int = 0

    @property
    def is_defined(self) -> bool:
        return self.status is SymbolStatus.DEFINED


# =============================================================================
# Chain Walking
# =============================================================================

def walk_chain(image: MemoryImage, head: int, tail: Optional[int] = None) -> Iterator[int]:
    """
    Yield the instruction addresses of a forward-reference chain.

    Reads the image only. Without a tail, the chain ends at the first
    node whose link is CHAIN_END. With tail=0, a link of 0 leads to the
    instruction at address 0, which ends the chain.

    Raises:
        AssemblerError: If a link does not point to an earlier instruction
    """
    site = head
    while True:
        yield site
        if site == tail:
            return
        link = image.read_operand_field(site)
        if link == CHAIN_END and tail != CHAIN_END:
            return
        if link >= site:
            raise AssemblerError(
                f"forward-reference chain is corrupt: instruction at {site} "
                f"links to {link}"
            )
        site = link


def patch_chain(
    image: MemoryImage,
    head: int,
    address: int,
    tail: Optional[int] = None,
) -> MemoryImage:
    """
    Resolve a forward-reference chain to address.

    Collects the chain first, then overwrites every node's operand field
    with address. Only operand bits change; each node's opcode survives.
    A corrupt chain is reported before anything is written. Returns the
    same image, patched in place.

    Raises:
        AssemblerError: If the chain is corrupt
        OperandOverflowError: If address does not fit the operand field
    """
    image.check_operand(address)
    sites = list(walk_chain(image, head, tail))
    for site in sites:
        image.write_operand_field(site, address)

    logger.debug(f"Backpatched {len(sites)} reference(s) to {address}: {sites}")
    return image


# =============================================================================
# Symbol Table
# =============================================================================

class SymbolTable:
    """
    Single-letter labels with one-pass forward-reference resolution.

    The table patches the memory image it was created with whenever a
    forward-referenced label gets defined. Entries are kept in order of
    first mention and never removed.
    """

    def __init__(self, image: MemoryImage):
        self._image = image
        self._symbols: dict[str, Symbol] = {}

    def define(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
    ) -> Symbol:
        """
        Define a label at address, resolving any pending references.

        Raises:
            DuplicateLabelError: If the label is already defined. Nothing
                is modified in that case.
        """
        symbol = self._symbols.get(name)

        if symbol is None:
            symbol = Symbol(name, address, SymbolStatus.DEFINED, location)
            self._symbols[name] = symbol
            logger.debug(f"Defined '{name}' at {address}")
            return symbol

        if symbol.is_defined:
            raise DuplicateLabelError(
                name,
                location=location,
                original_location=symbol.location,
            )

        logger.debug(f"Defined '{name}' at {address}, resolving chain from {symbol.slot}")
        patch_chain(self._image, symbol.slot, address, symbol.tail)
        symbol.status = SymbolStatus.DEFINED
        symbol.slot = address
        symbol.tail = None
        symbol.location = location
        return symbol

    def reference(self, name: str, address: int) -> int:
        """
        Record a reference from the instruction at address.

        Returns:
            The value to encode as the instruction's operand: the resolved
            address for a defined label, otherwise the previous chain head
            (CHAIN_END for the first reference)
        """
        symbol = self._symbols.get(name)

        if symbol is None:
            self._symbols[name] = Symbol(
                name, address, SymbolStatus.UNDEFINED, tail=address, references=1
            )
            logger.debug(f"First forward reference to '{name}' at {address}")
            return CHAIN_END

        symbol.references += 1
        if symbol.is_defined:
            return symbol.slot

        previous = symbol.slot
        symbol.slot = address
        logger.debug(f"Forward reference to '{name}' at {address}, links to {previous}")
        return previous

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def entries(self) -> list[tuple[str, int, SymbolStatus]]:
        """(name, slot, status) in order of first mention."""
        return [(s.name, s.slot, s.status) for s in self._symbols.values()]

    def unresolved(self) -> list[Symbol]:
        """Symbols still UNDEFINED, in order of first mention."""
        return [s for s in self._symbols.values() if not s.is_defined]

    def unresolved_sites(self, name: str) -> list[int]:
        """Instruction addresses still linked into the symbol's chain."""
        symbol = self._symbols[name]
        if symbol.is_defined:
            return []
        return list(walk_chain(self._image, symbol.slot, symbol.tail))

    def resolved(self) -> dict[str, int]:
        """Name to address for every defined symbol."""
        return {s.name: s.slot for s in self._symbols.values() if s.is_defined}

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)
