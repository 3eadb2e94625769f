from shorthand.shorthand_datatypes import (
    SourceMap, ShorthandError, DuplicateOperatorError, UnknownOperatorError,
    ParseMismatchError, FileReadError, FileWriteError, ShellExecError,
    ImportLineError, ConfigError, ExitRequest,
)
from shorthand.shorthand_symbols import SymbolTable
from shorthand.shorthand_config import Config, load_config
from shorthand.shorthand_runtime import VERSION, VirtualMachine, format_error

__all__ = [
    "SourceMap", "SymbolTable", "VirtualMachine", "Config", "load_config",
    "format_error", "VERSION",
    "ShorthandError", "DuplicateOperatorError", "UnknownOperatorError",
    "ParseMismatchError", "FileReadError", "FileWriteError", "ShellExecError",
    "ImportLineError", "ConfigError", "ExitRequest",
]
