"""
Line Parser
===========

Splits one source line into (label, mnemonic, operand). The grammar is
fixed: fields are separated by single spaces and a line has one of four
shapes, tried in this order:

    1. L OPC OPRD     first token is 1 character, 3 tokens
    2. L OPC          first token is 1 character, 2 tokens
    3. OPC OPRD       first token is 3 characters, 2 tokens
    4. OPC            first token is 3 characters, 1 token

Anything else is a MalformedLineError. Leading and trailing whitespace is
removed before splitting; a doubled space inside a line produces an empty
field and therefore fails to match.

The parser checks shape and label syntax only. Whether the mnemonic exists
or takes an operand is decided against the instruction set by the driver.
"""

from dataclasses import dataclass
from typing import Optional

from tinyasm.errors import InvalidLabelError, MalformedLineError

FIELD_SEPARATOR = " "
MNEMONIC_LENGTH = 3


@dataclass(frozen=True)
class ParsedLine:
    """
    Fields of one source line.

    Columns are 1-based positions within the stripped text, used to point
    diagnostics at the offending field.

    Attributes:
        text: The stripped line
        label: Label letter, or None
        mnemonic: Mnemonic token (not yet validated)
        operand: Operand text, or None
        mnemonic_column: Column of the mnemonic
        operand_column: Column of the operand (0 when absent)
    """
    text: str
    label: Optional[str]
    mnemonic: str
    operand: Optional[str]
    mnemonic_column: int = 1
    operand_column: int = 0

    @property
    def label_column(self) -> int:
        return 1 if self.label is not None else 0


def tokenize_line(line: str) -> list[str]:
    """Strip surrounding whitespace and split on single spaces."""
    return line.strip().split(FIELD_SEPARATOR)


def _column(tokens: list[str], index: int) -> int:
    return sum(len(token) for token in tokens[:index]) + index + 1


class LineParser:
    """Recognises the four line shapes."""

    def parse(self, line: str) -> ParsedLine:
        """
        Parse one line.

        Raises:
            MalformedLineError: If no shape matches
            InvalidLabelError: If the label is not a letter
        """
        text = line.strip()
        tokens = tokenize_line(line)
        count = len(tokens)
        first = tokens[0]

        if len(first) == 1 and count in (2, 3):
            self._check_label(first)
            operand = tokens[2] if count == 3 else None
            return ParsedLine(
                text=text,
                label=first,
                mnemonic=tokens[1],
                operand=operand,
                mnemonic_column=_column(tokens, 1),
                operand_column=_column(tokens, 2) if operand is not None else 0,
            )

        if len(first) == MNEMONIC_LENGTH and count in (1, 2):
            operand = tokens[1] if count == 2 else None
            return ParsedLine(
                text=text,
                label=None,
                mnemonic=first,
                operand=operand,
                mnemonic_column=1,
                operand_column=_column(tokens, 1) if operand is not None else 0,
            )

        raise MalformedLineError(text)

    @staticmethod
    def _check_label(label: str) -> None:
        if not label.isalpha():
            raise InvalidLabelError(label)


def parse_line(line: str) -> ParsedLine:
    """Convenience wrapper around LineParser().parse()."""
    return LineParser().parse(line)
