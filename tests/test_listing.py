# =============================================================================
# test_listing.py - Listing and Decoder Tests
# =============================================================================
# Tests for the human-readable views of an assembly run and for decoding
# a memory image back into instructions.
#
# Test coverage includes:
#   - First-pass trace showing unresolved chain links
#   - Symbol table and symbol file formats
#   - Object listing and decode_image on both layouts
#   - Unknown and truncated instructions
# =============================================================================

from tinyasm.assembler import (
    Assembler,
    MemoryImage,
    format_symbol_file,
    format_symbol_table,
    format_trace,
)
from tinyasm.disassembler import decode_image, decode_instruction
from tinyasm.machine import M256_N8, M1024_N16


SAMPLE = "A LOD B\nSTO A\nB HLT"


def assembled(source, machine="m256n8", **kwargs):
    asm = Assembler(machine, **kwargs)
    asm.assemble_string(source)
    return asm


# =============================================================================
# Listing Tests
# =============================================================================

class TestTrace:
    """Test the first-pass trace."""

    def test_header(self):
        asm = assembled(SAMPLE)
        trace = format_trace(asm.get_listing_entries(), asm.machine)
        assert trace.splitlines()[0] == "First pass (labels unresolved)"

    def test_forward_reference_shows_link(self):
        """LOD B is traced before B is defined, with a zero link."""
        asm = assembled(SAMPLE)
        rows = format_trace(asm.get_listing_entries(), asm.machine).splitlines()
        assert rows[3] == "   0  A      LOD B         00000001  00000000"
        assert rows[5] == "   4  B      HLT           00000000"

    def test_source_column_omits_label(self):
        """The label has its own column."""
        entries = assembled(SAMPLE).get_listing_entries()
        assert [e.source for e in entries] == ["LOD B", "STO A", "HLT"]

    def test_packed_field_widths(self):
        asm = assembled("BRA E\nE HLT", "m1024n16")
        rows = format_trace(asm.get_listing_entries(), asm.machine).splitlines()
        assert rows[3].endswith("000110  0000000000")

    def test_entries(self):
        entries = assembled(SAMPLE).get_listing_entries()
        assert [e.address for e in entries] == [0, 2, 4]
        assert [e.line_number for e in entries] == [1, 2, 3]
        assert entries[0].label == "A"
        assert entries[2].operand is None


class TestSymbolListing:
    """Test symbol table views."""

    def test_symbol_table(self):
        table = format_symbol_table(assembled(SAMPLE).symbols)
        lines = table.splitlines()
        assert lines[0] == "Symbol table"
        assert lines[2] == "A        0  D"
        assert lines[3] == "B        4  D"

    def test_unresolved_status(self):
        asm = assembled("LOD X", allow_unresolved=True)
        assert "X        0  U" in format_symbol_table(asm.symbols)

    def test_symbol_file(self):
        content = format_symbol_file(assembled(SAMPLE).symbols)
        assert content.startswith("# Symbol table\n")
        assert content.endswith("A 0 D\nB 4 D\n")


class TestFullListing:
    """Test get_listing()."""

    def test_sections(self):
        listing = assembled(SAMPLE).get_listing()
        assert "First pass (labels unresolved)" in listing
        assert "Symbol table" in listing
        assert "Assembled object" in listing

    def test_object_shows_patched_operand(self):
        listing = assembled(SAMPLE).get_listing()
        assert "00000001 00000100  LOD 4" in listing
        assert "STO 0" in listing

    def test_object_packed(self):
        listing = assembled("BRA E\nE HLT", "m1024n16").get_listing()
        assert "0001100000000001" in listing
        assert "BRA 1" in listing


# =============================================================================
# Decoder Tests
# =============================================================================

class TestDecoder:
    """Test decode_instruction and decode_image."""

    def test_decode_split(self):
        image = assembled(SAMPLE).image
        decoded = decode_image(image)
        assert [(d.mnemonic, d.operand) for d in decoded] == [
            ("LOD", 4), ("STO", 0), ("HLT", None),
        ]
        assert [d.address for d in decoded] == [0, 2, 4]

    def test_decode_packed(self):
        image = assembled(SAMPLE, "m1024n16").image
        decoded = decode_image(image, end=3)
        assert [(d.mnemonic, d.operand, d.size) for d in decoded] == [
            ("LOD", 2, 1), ("STO", 0, 1), ("HLT", None, 1),
        ]

    def test_empty_image(self):
        """An empty image decodes as a single HLT."""
        decoded = decode_image(MemoryImage(M256_N8))
        assert len(decoded) == 1
        assert decoded[0].mnemonic == "HLT"

    def test_unknown_opcode(self):
        image = MemoryImage(M256_N8)
        image.write(0, 200)
        instr = decode_instruction(image, 0)
        assert instr.mnemonic == "DATA"
        assert instr.operand == 200
        assert instr.comment == "unknown opcode"

    def test_truncated_instruction(self):
        """LOD in the last word has no room for its operand."""
        image = MemoryImage(M256_N8)
        image.write(255, 1)
        instr = decode_instruction(image, 255)
        assert instr.mnemonic == "DATA"
        assert instr.comment == "truncated instruction"

    def test_packed_unknown_opcode(self):
        image = MemoryImage(M1024_N16)
        image.write(0, 63 << 10)
        assert decode_instruction(image, 0).mnemonic == "DATA"

    def test_str_and_dict(self):
        instr = decode_image(assembled(SAMPLE).image)[0]
        assert str(instr) == "   0: LOD 4"
        assert instr.to_dict()["words"] == [1, 4]
