import logging
import struct
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

_WORD_FORMATS = {4: "I", 8: "Q"}
_BYTE_ORDERS = {"little": "<", "big": ">"}


def build_snapshot(
    data: bytes,
    base_address: int = 0,
    address_size: int = 8,
    endianness: str = "little",
    alignment: Optional[int] = None,
    value_range: Optional[Tuple[int, int]] = None,
) -> Dict[int, int]:
    """
    Decode a raw memory dump into an address to value snapshot.

    Args:
        data (bytes): Dump contents, starting at base_address.
        base_address (int): Address of the first byte of data.
        address_size (int): Word size in bytes, 4 or 8.
        endianness (str): "little" or "big".
        alignment (Optional[int]): Step between words, defaults to address_size.
        value_range (Optional[Tuple[int, int]]): Keep only words whose value is in [low, high).

    Returns:
        Dict[int, int]: One entry per decoded word.
    """
    if address_size not in _WORD_FORMATS:
        raise ValueError(f"Unsupported address size: {address_size}")
    if endianness not in _BYTE_ORDERS:
        raise ValueError(f"Unsupported endianness: {endianness}")
    step = address_size if alignment is None else alignment
    if step <= 0:
        raise ValueError(f"Alignment must be positive, got {step}")

    fmt = _BYTE_ORDERS[endianness] + _WORD_FORMATS[address_size]
    snapshot = {}
    for position in range(0, len(data) - address_size + 1, step):
        (value,) = struct.unpack_from(fmt, data, position)
        if value_range is not None and not value_range[0] <= value < value_range[1]:
            continue
        snapshot[base_address + position] = value

    logger.debug(
        f"Built snapshot with {len(snapshot)} entries from {len(data)} bytes at {base_address:#x}"
    )
    return snapshot
