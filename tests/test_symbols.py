# =============================================================================
# test_symbols.py - Symbol Table and Backpatch Tests
# =============================================================================
# Unit tests for forward-reference chains threaded through operand fields.
#
# Test coverage includes:
#   - define/reference state transitions
#   - Chain walking and patching on both layouts
#   - Chains whose oldest reference sits at address 0
#   - Duplicate definitions and corrupt chains
# =============================================================================

import pytest

from tinyasm.assembler import (
    CHAIN_END,
    MemoryImage,
    SymbolStatus,
    SymbolTable,
    patch_chain,
    walk_chain,
)
from tinyasm.errors import AssemblerError, DuplicateLabelError, OperandOverflowError, SourceLocation
from tinyasm.machine import M256_N8, M1024_N16


def emit(image, symbols, address, opcode, name):
    """Encode an instruction whose operand references name."""
    image.encode(address, opcode, symbols.reference(name, address), True)


# =============================================================================
# Define / Reference
# =============================================================================

class TestDefineAndReference:
    """Test symbol table state transitions."""

    def test_define_new(self, symbols):
        """A label seen first as a definition is DEFINED immediately."""
        symbol = symbols.define("A", 4)
        assert symbol.is_defined
        assert symbols.entries() == [("A", 4, SymbolStatus.DEFINED)]

    def test_backward_reference(self, symbols):
        """References to a defined label return its address."""
        symbols.define("A", 9)
        assert symbols.reference("A", 20) == 9
        assert symbols.get("A").references == 1

    def test_first_forward_reference(self, symbols):
        """First reference records UNDEFINED with the site as chain head."""
        assert symbols.reference("X", 6) == CHAIN_END
        assert symbols.entries() == [("X", 6, SymbolStatus.UNDEFINED)]

    def test_second_forward_reference_links(self, symbols):
        """Later references return the previous head and become the head."""
        symbols.reference("X", 2)
        assert symbols.reference("X", 4) == 2
        assert symbols.get("X").slot == 4

    def test_entries_in_first_mention_order(self, symbols):
        symbols.reference("Q", 0)
        symbols.define("B", 2)
        symbols.define("Q", 4)
        assert [name for name, _, _ in symbols.entries()] == ["Q", "B"]

    def test_status_letters(self):
        assert str(SymbolStatus.DEFINED) == "D"
        assert str(SymbolStatus.UNDEFINED) == "U"

    def test_resolved_and_unresolved(self, symbols):
        symbols.define("A", 1)
        symbols.reference("B", 3)
        assert symbols.resolved() == {"A": 1}
        assert [s.name for s in symbols.unresolved()] == ["B"]
        assert "B" in symbols
        assert len(symbols) == 2


class TestDuplicateLabel:
    """Test redefinition of a label."""

    def test_duplicate_raises(self, symbols):
        first = SourceLocation("prog.asm", 1, 1)
        symbols.define("A", 0, first)
        with pytest.raises(DuplicateLabelError) as exc_info:
            symbols.define("A", 5, SourceLocation("prog.asm", 4, 1))
        assert exc_info.value.symbol == "A"
        assert exc_info.value.original_location == first
        assert "prog.asm:1:1" in exc_info.value.hint

    def test_duplicate_leaves_state(self, split_image):
        """A failed redefinition changes neither table nor image."""
        symbols = SymbolTable(split_image)
        symbols.define("A", 0)
        emit(split_image, symbols, 0, 1, "A")
        before = split_image.words
        with pytest.raises(DuplicateLabelError):
            symbols.define("A", 2)
        assert split_image.words == before
        assert symbols.get("A").slot == 0


# =============================================================================
# Backpatching
# =============================================================================

class TestBackpatch:
    """Test chain resolution through the memory image."""

    def test_three_reference_chain_split(self, split_image):
        """LOD X / ADD X / STO X / X HLT on the 8-bit machine."""
        symbols = SymbolTable(split_image)
        emit(split_image, symbols, 0, 1, "X")
        emit(split_image, symbols, 2, 3, "X")
        emit(split_image, symbols, 4, 2, "X")
        assert split_image.words[:6] == (1, 0, 3, 0, 2, 2)

        symbols.define("X", 6)
        assert split_image.words[:7] == (1, 6, 3, 6, 2, 6, 0)
        assert symbols.get("X").is_defined
        assert symbols.get("X").slot == 6

    def test_chain_not_starting_at_zero(self, split_image):
        """A chain whose first reference is not at address 0."""
        symbols = SymbolTable(split_image)
        split_image.encode(0, 9, 0, False)
        emit(split_image, symbols, 1, 1, "B")
        emit(split_image, symbols, 3, 3, "B")
        symbols.define("B", 5)
        assert split_image.words[:5] == (9, 1, 5, 3, 5)

    def test_packed_chain_keeps_opcodes(self, packed_image):
        """Patching on the packed layout rewrites operand bits only."""
        symbols = SymbolTable(packed_image)
        emit(packed_image, symbols, 0, 6, "E")
        emit(packed_image, symbols, 1, 4, "E")
        emit(packed_image, symbols, 2, 5, "E")
        symbols.define("E", 3)
        for address, opcode in [(0, 6), (1, 4), (2, 5)]:
            assert packed_image.read_opcode_field(address) == opcode
            assert packed_image.read_operand_field(address) == 3

    def test_references_after_definition_not_chained(self, split_image):
        symbols = SymbolTable(split_image)
        emit(split_image, symbols, 0, 6, "L")
        symbols.define("L", 2)
        emit(split_image, symbols, 2, 6, "L")
        assert split_image.words[:4] == (6, 2, 6, 2)

    def test_unresolved_sites(self, split_image):
        symbols = SymbolTable(split_image)
        emit(split_image, symbols, 0, 1, "Z")
        emit(split_image, symbols, 2, 1, "Z")
        emit(split_image, symbols, 4, 1, "Z")
        assert symbols.unresolved_sites("Z") == [4, 2, 0]


class TestWalkChain:
    """Test walk_chain() directly."""

    def test_walk_stops_at_terminator(self, split_image):
        split_image.encode(3, 1, CHAIN_END, True)
        split_image.encode(5, 1, 3, True)
        assert list(walk_chain(split_image, 5)) == [5, 3]

    def test_walk_to_tail_zero(self, split_image):
        """With tail 0 the link 0 is followed to the instruction at 0."""
        split_image.encode(0, 1, CHAIN_END, True)
        split_image.encode(2, 1, 0, True)
        assert list(walk_chain(split_image, 2, tail=0)) == [2, 0]

    def test_walk_single_node_at_zero(self, split_image):
        split_image.encode(0, 1, CHAIN_END, True)
        assert list(walk_chain(split_image, 0, tail=0)) == [0]

    def test_corrupt_chain(self, split_image):
        """A link pointing forward is reported, nothing is written."""
        split_image.encode(2, 1, 4, True)
        split_image.encode(4, 1, 0, True)
        before = split_image.words
        with pytest.raises(AssemblerError, match="corrupt"):
            patch_chain(split_image, 2, 9)
        assert split_image.words == before

    def test_patch_overflow(self, split_image):
        split_image.encode(0, 1, 0, True)
        with pytest.raises(OperandOverflowError):
            patch_chain(split_image, 0, 300, tail=0)

    def test_patch_returns_image(self, packed_image):
        packed_image.encode(0, 1, 0, True)
        assert patch_chain(packed_image, 0, 12, tail=0) is packed_image
        assert packed_image.read_operand_field(0) == 12
