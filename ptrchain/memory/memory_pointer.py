from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple, Union

from ptrchain.utils.conversions import INT64_MAX, INT64_MIN, UINT64_MASK


class OffsetPrintingSetting(Enum):
    SIGNED = "signed"
    UNSIGNED = "unsigned"


def _check_address(address: int) -> None:
    if not 0 <= address <= UINT64_MASK:
        raise ValueError(f"Address out of unsigned 64-bit range: {address:#x}")


@dataclass(frozen=True)
class AbsoluteBase:
    address: int

    def __post_init__(self):
        _check_address(self.address)


@dataclass(frozen=True)
class ModuleBase:
    """Module-relative base, e.g. ``Module.so+0x40`` resolved to an absolute address."""

    module: str
    address: int

    def __post_init__(self):
        if not self.module:
            raise ValueError("Module base requires a module name")
        _check_address(self.address)


Base = Union[AbsoluteBase, ModuleBase]


@dataclass(frozen=True)
class MemoryPointer:
    """
    A pointer chain: a base address followed by the offsets applied
    after each dereference, outermost first.

    Instances are immutable. Use with_offset() and with_base() to build
    a pointer up step by step.
    """

    base: Base
    offsets: Tuple[int, ...] = field(default=())

    def __post_init__(self):
        if not isinstance(self.base, (AbsoluteBase, ModuleBase)):
            raise TypeError(f"Unsupported base type: {type(self.base).__name__}")
        offsets = tuple(self.offsets)
        for offset in offsets:
            if not isinstance(offset, int) or isinstance(offset, bool):
                raise ValueError(f"Offset must be an integer, got {offset!r}")
            if not INT64_MIN <= offset <= INT64_MAX:
                raise ValueError(f"Offset out of signed 64-bit range: {offset:#x}")
        object.__setattr__(self, "offsets", offsets)

    @classmethod
    def absolute(cls, address: int, offsets: Iterable[int] = ()) -> "MemoryPointer":
        return cls(AbsoluteBase(address), tuple(offsets))

    @classmethod
    def from_module(cls, module: str, address: int, offsets: Iterable[int] = ()) -> "MemoryPointer":
        return cls(ModuleBase(module, address), tuple(offsets))

    @property
    def base_address(self) -> int:
        return self.base.address

    @property
    def is_module_relative(self) -> bool:
        return isinstance(self.base, ModuleBase)

    @property
    def depth(self) -> int:
        return len(self.offsets)

    def with_offset(self, offset: int) -> "MemoryPointer":
        """Return a copy with one more offset appended to the chain."""
        return MemoryPointer(self.base, self.offsets + (offset,))

    def with_base(self, base: Base) -> "MemoryPointer":
        return MemoryPointer(base, self.offsets)

    def __str__(self) -> str:
        # Imported here, formatting depends on this module
        from ptrchain.utils.formatting import format_memory_pointer

        return format_memory_pointer(self)
