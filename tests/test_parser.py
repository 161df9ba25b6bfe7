# =============================================================================
# test_parser.py - Line Parser Tests
# =============================================================================
# Unit tests for splitting source lines into label, mnemonic and operand.
#
# Test coverage includes:
#   - The four accepted line shapes
#   - Field columns used by diagnostics
#   - Malformed lines and invalid labels
# =============================================================================

import pytest

from tinyasm.assembler import LineParser, parse_line, tokenize_line
from tinyasm.errors import AssemblySyntaxError, InvalidLabelError, MalformedLineError


class TestLineShapes:
    """Test recognition of L OPC OPRD, L OPC, OPC OPRD and OPC."""

    def test_label_mnemonic_operand(self):
        parsed = parse_line("A LOD B")
        assert (parsed.label, parsed.mnemonic, parsed.operand) == ("A", "LOD", "B")

    def test_label_mnemonic(self):
        parsed = parse_line("B HLT")
        assert (parsed.label, parsed.mnemonic, parsed.operand) == ("B", "HLT", None)

    def test_mnemonic_operand(self):
        parsed = parse_line("STO 12")
        assert (parsed.label, parsed.mnemonic, parsed.operand) == (None, "STO", "12")

    def test_mnemonic_only(self):
        parsed = parse_line("CLA")
        assert (parsed.label, parsed.mnemonic, parsed.operand) == (None, "CLA", None)

    def test_surrounding_whitespace_stripped(self):
        """Indentation and trailing blanks are ignored."""
        parsed = parse_line("   STO A  \t")
        assert parsed.text == "STO A"
        assert parsed.operand == "A"

    def test_mnemonic_not_validated(self):
        """Unknown three-letter mnemonics parse; the driver rejects them."""
        assert parse_line("XYZ").mnemonic == "XYZ"

    def test_tokenize(self):
        assert tokenize_line(" A LOD B ") == ["A", "LOD", "B"]


class TestColumns:
    """Test field columns within the stripped line."""

    def test_columns_with_label(self):
        parsed = parse_line("A LOD 300")
        assert parsed.label_column == 1
        assert parsed.mnemonic_column == 3
        assert parsed.operand_column == 7

    def test_columns_without_label(self):
        parsed = parse_line("LOD 300")
        assert parsed.label_column == 0
        assert parsed.mnemonic_column == 1
        assert parsed.operand_column == 5

    def test_no_operand_column(self):
        assert parse_line("HLT").operand_column == 0


class TestMalformedLines:
    """Test lines that fit none of the shapes."""

    @pytest.mark.parametrize("line", [
        "LOD A B",          # three tokens, first is a mnemonic
        "A B C D",          # four tokens
        "LOAD A",           # four-letter mnemonic
        "AB LOD",           # two-letter first token
        "LOD  A",           # doubled space yields an empty field
        "A",                # lone label
    ])
    def test_malformed(self, line):
        with pytest.raises(MalformedLineError) as exc_info:
            LineParser().parse(line)
        assert exc_info.value.text == line.strip()

    def test_malformed_is_syntax_error(self):
        with pytest.raises(AssemblySyntaxError):
            parse_line("TOO MANY TOKENS HERE")

    def test_hint_lists_shapes(self):
        with pytest.raises(MalformedLineError) as exc_info:
            parse_line("A B C D")
        assert "L OPC OPRD" in exc_info.value.hint


class TestLabels:
    """Test label validation."""

    @pytest.mark.parametrize("label", ["1", "_", "$"])
    def test_non_letter_label(self, label):
        with pytest.raises(InvalidLabelError) as exc_info:
            parse_line(f"{label} LOD 5")
        assert exc_info.value.label == label
        assert "must be a letter" in exc_info.value.message

    def test_lower_case_label(self):
        """Labels are case-sensitive letters; lower case is allowed."""
        assert parse_line("a HLT").label == "a"
