from .memory.memory_pointer import AbsoluteBase, MemoryPointer, ModuleBase, OffsetPrintingSetting
from .memory.snapshot import build_snapshot
from .parser.expression_parser import (
    MalformedExpressionError,
    parse_memory_pointer,
    parse_memory_pointers,
)
from .analyzer.chain_resolver import ChainResolver, follow_chain, reaches_destination
from .utils.formatting import format_memory_pointer, format_memory_pointers
from .utils.conversions import to_hexadecimal
from .logging.logging_config import setup_logging

__all__ = [
    "AbsoluteBase",
    "MemoryPointer",
    "ModuleBase",
    "OffsetPrintingSetting",
    "build_snapshot",
    "MalformedExpressionError",
    "parse_memory_pointer",
    "parse_memory_pointers",
    "ChainResolver",
    "follow_chain",
    "reaches_destination",
    "format_memory_pointer",
    "format_memory_pointers",
    "to_hexadecimal",
    "setup_logging",
]
