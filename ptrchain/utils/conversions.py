from typing import Optional

HEXADECIMAL_HEADER = "0x"
DEFAULT_ADDRESS_SIZE = 8

UINT64_MASK = 0xFFFFFFFFFFFFFFFF
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


def to_unsigned64(value: int) -> int:
    """Reinterpret an integer as an unsigned 64-bit value."""
    return value & UINT64_MASK


def to_signed64(value: int) -> int:
    """Reinterpret an integer as a signed 64-bit value."""
    value &= UINT64_MASK
    return value - (1 << 64) if value > INT64_MAX else value


def to_signed32(value: int) -> int:
    """Reinterpret an integer as a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value > INT32_MAX else value


def parse_unsigned_hex(digits: str) -> Optional[int]:
    """
    Parse a run of hexadecimal digits as an unsigned 64-bit integer.

    Returns None when the run is empty, contains a non-hex character
    or does not fit in 64 bits.
    """
    if not digits or any(c not in "0123456789abcdefABCDEF" for c in digits):
        return None
    value = int(digits, 16)
    if value > UINT64_MASK:
        return None
    return value


def to_hexadecimal(value: int, address_size: int = DEFAULT_ADDRESS_SIZE, prefix: bool = False) -> str:
    """
    Format a value as zero-padded uppercase hexadecimal.

    Args:
        value (int): Value to format, negative values are shown as 64-bit two's complement.
        address_size (int): Width in bytes, the output has at least address_size * 2 digits.
        prefix (bool): Prepend the 0x header.

    Returns:
        str: The formatted value.
    """
    if address_size <= 0:
        raise ValueError(f"Address size must be positive, got {address_size}")
    formatted = format(to_unsigned64(value), f"0{address_size * 2}X")
    return HEXADECIMAL_HEADER + formatted if prefix else formatted
