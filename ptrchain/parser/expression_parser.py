"""
Parser for the bracketed pointer notation, e.g.::

    [[0x81234560] + 0x10] - 0x4
    [Module.so+0x40 (=0x81234560)] + 0x10]

The text is split into tokens: optional opening brackets, the base
expression up to the first closing bracket, then one offset term per
closing bracket. A single closing bracket after the last offset is
accepted.
"""
import logging
import re
from typing import List

from ptrchain.memory.memory_pointer import AbsoluteBase, Base, MemoryPointer, ModuleBase
from ptrchain.utils.conversions import HEXADECIMAL_HEADER, parse_unsigned_hex, to_signed64

logger = logging.getLogger(__name__)

OPENING_BRACKET = "["
CLOSING_BRACKET = "]"

_ABSOLUTE_BASE = re.compile(r"0x(?P<digits>\w*)")
_MODULE_BASE = re.compile(r"(?P<module>.+?) \(\s*=\s*0x(?P<digits>\w*)\s*\)")
_OFFSET_TERM = re.compile(r"\s*(?P<sign>[+-])\s*0x(?P<digits>\w*)\s*")


class MalformedExpressionError(ValueError):
    """Raised when a pointer expression does not follow the bracketed notation."""

    def __init__(self, reason: str, text: str):
        super().__init__(f"{reason}: {text!r}")
        self.reason = reason
        self.text = text


def _malformed(reason: str, text: str) -> MalformedExpressionError:
    logger.debug(f"Rejected pointer expression {text!r}: {reason}")
    return MalformedExpressionError(reason, text)


def _parse_hex(digits: str, text: str) -> int:
    value = parse_unsigned_hex(digits)
    if value is None:
        raise _malformed(f"Invalid hexadecimal value {HEXADECIMAL_HEADER}{digits}", text)
    return value


def _parse_base(expression: str, text: str) -> Base:
    if " " in expression:
        match = _MODULE_BASE.fullmatch(expression)
        if match is None:
            raise _malformed("Module base must look like 'Name (=0x...)'", text)
        return ModuleBase(match.group("module"), _parse_hex(match.group("digits"), text))

    match = _ABSOLUTE_BASE.fullmatch(expression)
    if match is None:
        raise _malformed(f"Base address must start with {HEXADECIMAL_HEADER}", text)
    return AbsoluteBase(_parse_hex(match.group("digits"), text))


def _parse_offset(term: str, text: str) -> int:
    match = _OFFSET_TERM.fullmatch(term)
    if match is None:
        raise _malformed(f"Offset term {term.strip()!r} must look like '+ 0x...' or '- 0x...'", text)
    offset = to_signed64(_parse_hex(match.group("digits"), text))
    if match.group("sign") == "-":
        offset = to_signed64(-offset)
    return offset


def parse_memory_pointer(text: str) -> MemoryPointer:
    """
    Parse a pointer expression into a MemoryPointer.

    Args:
        text (str): Expression such as ``[[0x1000] + 0x10] - 0x4``.

    Returns:
        MemoryPointer: Parsed base and offsets in chain order.

    Raises:
        MalformedExpressionError: If the expression does not follow the notation.
    """
    expression = text.strip()
    base_start = len(expression) - len(expression.lstrip(OPENING_BRACKET))
    base_end = expression.find(CLOSING_BRACKET, base_start)
    if base_end == -1:
        raise _malformed("Missing closing bracket after base address", text)

    base_expression = expression[base_start:base_end].strip()
    if OPENING_BRACKET in base_expression:
        raise _malformed("Unexpected opening bracket inside base address", text)
    base = _parse_base(base_expression, text)

    terms = expression[base_end + 1:].split(CLOSING_BRACKET)
    if not terms[-1].strip():
        terms.pop()
    offsets = tuple(_parse_offset(term, text) for term in terms)

    # One leading bracket per offset, or a single bracket around the base
    if base_start > 1 and base_start != len(offsets):
        raise _malformed(
            f"Found {base_start} opening brackets for {len(offsets)} offsets", text
        )

    return MemoryPointer(base, offsets)


def parse_memory_pointers(text: str) -> List[MemoryPointer]:
    """Parse one pointer expression per line, skipping blank lines."""
    pointers = [parse_memory_pointer(line) for line in text.splitlines() if line.strip()]
    logger.debug(f"Parsed {len(pointers)} pointer expressions.")
    return pointers
