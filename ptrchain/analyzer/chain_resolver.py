import logging
from typing import Iterable, List, Mapping, Optional, Tuple

from ptrchain.memory.memory_pointer import MemoryPointer
from ptrchain.utils.conversions import UINT64_MASK

logger = logging.getLogger(__name__)

Snapshot = Mapping[int, int]


def follow_chain(
    pointer: MemoryPointer,
    snapshot: Snapshot,
    starting_offset: int = 0,
    exclude_cycles: bool = True,
    return_raw_value: bool = False,
) -> Optional[int]:
    """
    Walk a pointer chain through a memory snapshot.

    Every address is translated by subtracting starting_offset before it
    is looked up, so a snapshot keyed by module-relative offsets can be
    walked with absolute pointers.

    Args:
        pointer (MemoryPointer): Chain to follow.
        snapshot (Mapping[int, int]): Address to stored value mapping, read only.
        starting_offset (int): Normalization constant subtracted from every lookup address.
        exclude_cycles (bool): Give up when the chain revisits an address.
        return_raw_value (bool): Return the value read before the last offset is applied.

    Returns:
        Optional[int]: The final address (or raw value), None if the chain does not resolve.
    """
    current = (pointer.base_address - starting_offset) & UINT64_MASK
    if current not in snapshot:
        return None

    visited = {current}
    offsets = pointer.offsets
    last_index = len(offsets) - 1

    for index, offset in enumerate(offsets):
        value = snapshot[current]

        if return_raw_value and index == last_index:
            return value

        target = (value + offset) & UINT64_MASK
        normalized = (target - starting_offset) & UINT64_MASK

        if normalized in visited:
            if exclude_cycles:
                return None
        else:
            visited.add(normalized)

        if index == last_index:
            current = target
            break

        current = normalized
        if current not in snapshot:
            # Broken chain, not a pointer path in this snapshot
            return None

    return current


def reaches_destination(
    pointer: MemoryPointer,
    snapshot: Snapshot,
    target_address: int,
    starting_offset: int = 0,
    exclude_cycles: bool = True,
) -> bool:
    """Check whether following the chain lands exactly on target_address."""
    destination = follow_chain(pointer, snapshot, starting_offset, exclude_cycles, False)
    if destination is None:
        return False
    return destination == target_address


class ChainResolver:
    """Resolves batches of pointers against one snapshot with fixed settings."""

    def __init__(self, snapshot: Snapshot, starting_offset: int = 0, exclude_cycles: bool = True):
        self.snapshot = snapshot
        self.starting_offset = starting_offset
        self.exclude_cycles = exclude_cycles
        logger.info(
            f"Initialized ChainResolver with {len(snapshot)} snapshot entries, "
            f"starting offset {starting_offset:#x}, exclude cycles: {exclude_cycles}"
        )

    def follow(self, pointer: MemoryPointer, return_raw_value: bool = False) -> Optional[int]:
        return follow_chain(
            pointer, self.snapshot, self.starting_offset, self.exclude_cycles, return_raw_value
        )

    def reaches(self, pointer: MemoryPointer, target_address: int) -> bool:
        return reaches_destination(
            pointer, self.snapshot, target_address, self.starting_offset, self.exclude_cycles
        )

    def resolve_all(self, pointers: Iterable[MemoryPointer]) -> List[Tuple[MemoryPointer, Optional[int]]]:
        """Follow every pointer, pairing each with its destination or None."""
        results = [(pointer, self.follow(pointer)) for pointer in pointers]
        resolved = sum(1 for _, destination in results if destination is not None)
        logger.info(f"Resolved {resolved} of {len(results)} pointers.")
        return results

    def find_reaching(self, pointers: Iterable[MemoryPointer], target_address: int) -> List[MemoryPointer]:
        """
        Filter the pointers that reach target_address, keeping input order.

        Pointers that do not resolve are skipped.
        """
        matches = []
        checked = 0
        for pointer in pointers:
            checked += 1
            if self.reaches(pointer, target_address):
                matches.append(pointer)
        logger.info(f"Found {len(matches)} of {checked} pointers reaching {target_address:#x}")
        return matches
