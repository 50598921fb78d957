import logging
from typing import Iterable

from ptrchain.memory.memory_pointer import MemoryPointer, ModuleBase, OffsetPrintingSetting
from ptrchain.utils.conversions import (
    DEFAULT_ADDRESS_SIZE,
    INT32_MAX,
    INT32_MIN,
    to_hexadecimal,
    to_signed32,
    to_signed64,
)

logger = logging.getLogger(__name__)

OPENING_BRACKET = "["
CLOSING_BRACKET = "]"
LINE_SEPARATOR = "\n"


def signed_offset_magnitude(offset: int) -> int:
    """
    Display magnitude of a negative offset under signed printing.

    The modulus INT32_MAX + |INT32_MIN| is evaluated in 32-bit arithmetic,
    where |INT32_MIN| wraps back to INT32_MIN and the sum is -1, and the
    remaining steps are 64-bit.
    """
    integer_max_value = to_signed32(INT32_MAX + to_signed32(abs(INT32_MIN)))
    return to_signed64(integer_max_value - offset + 1)


def format_memory_pointer(
    pointer: MemoryPointer,
    signed_offsets: bool = True,
    address_size: int = DEFAULT_ADDRESS_SIZE,
    hex_prefix: bool = False,
) -> str:
    """
    Render a pointer in the bracketed notation.

    Args:
        pointer (MemoryPointer): Pointer to render.
        signed_offsets (bool): Show negative offsets with a '-' sign instead of as unsigned values.
        address_size (int): Address width in bytes, hex values are padded to twice this many digits.
        hex_prefix (bool): Emit the 0x header so the output can be parsed back.

    Returns:
        str: The rendered pointer, without trailing whitespace.
    """
    parts = [OPENING_BRACKET * pointer.depth]

    if isinstance(pointer.base, ModuleBase):
        parts.append(pointer.base.module)
    else:
        parts.append(to_hexadecimal(pointer.base_address, address_size, hex_prefix))
    parts.append(CLOSING_BRACKET + " ")

    last_index = pointer.depth - 1
    for index, offset in enumerate(pointer.offsets):
        if offset < 0 and signed_offsets:
            offset = signed_offset_magnitude(offset)
            parts.append("-")
        else:
            parts.append("+")

        parts.append(" ")
        parts.append(to_hexadecimal(offset, address_size, hex_prefix))

        if index != last_index:
            parts.append(CLOSING_BRACKET + " ")

    return "".join(parts).rstrip()


def format_memory_pointers(
    pointers: Iterable[MemoryPointer],
    address_size: int = DEFAULT_ADDRESS_SIZE,
    setting: OffsetPrintingSetting = OffsetPrintingSetting.SIGNED,
    hex_prefix: bool = False,
) -> str:
    """Render pointers one per line, in input order."""
    signed_offsets = setting == OffsetPrintingSetting.SIGNED
    lines = [
        format_memory_pointer(pointer, signed_offsets, address_size, hex_prefix)
        for pointer in pointers
    ]
    logger.debug(f"Formatted {len(lines)} pointers with {setting.value} offsets.")
    return LINE_SEPARATOR.join(lines).strip()
