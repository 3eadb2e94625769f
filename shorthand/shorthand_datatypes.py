"""
Defines the core data types for the shorthand runtime.

A SourceMap is the unit of storage and evaluation: one parsed line with
its label, operator token, raw source and computed expansion. The
exception hierarchy used by operator handlers lives here as well.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class SourceMap:
    """One parsed (and possibly evaluated) shorthand line."""
    label: str = ""
    op: str = ""
    source: str = ""
    expanded: str = ""
    line_no: int = -1

    @property
    def is_assignment(self) -> bool:
        return self.op != ""

    def with_expanded(self, expanded: str) -> "SourceMap":
        return replace(self, expanded=expanded)

    def without_label(self) -> "SourceMap":
        return replace(self, label="")

    def statement(self) -> str:
        """Reconstruct the assignment line; the operator token carries its own spacing."""
        return f"{self.label}{self.op}{self.source}"


# Returned by SymbolTable.get() for labels that were never bound.
NOT_FOUND = SourceMap(line_no=-1)


# =================================================================
# Errors
# =================================================================

class ShorthandError(Exception):
    """Base class for every failure raised while evaluating shorthand."""
    pass


class DuplicateOperatorError(ShorthandError):
    def __init__(self, op: str):
        super().__init__(f"cannot redefine operator {op.strip()!r}")
        self.op = op


class UnknownOperatorError(ShorthandError):
    def __init__(self, op: str, line: str):
        super().__init__(f"{line.strip()} is not an expansion or valid assignment")
        self.op = op
        self.line = line


class ParseMismatchError(ShorthandError):
    def __init__(self, line: str, line_no: int):
        super().__init__(f"not an assignment: {line.strip()}")
        self.line = line
        self.line_no = line_no


class FileReadError(ShorthandError):
    def __init__(self, path: str, cause: Optional[BaseException] = None):
        detail = f": {cause.strerror or cause}" if isinstance(cause, OSError) else (f": {cause}" if cause else "")
        super().__init__(f"cannot read {path}{detail}")
        self.path = path
        self.cause = cause


class FileWriteError(ShorthandError):
    def __init__(self, path: str, cause: Optional[BaseException] = None):
        detail = f": {cause.strerror or cause}" if isinstance(cause, OSError) else (f": {cause}" if cause else "")
        super().__init__(f"cannot write {path}{detail}")
        self.path = path
        self.cause = cause


class ShellExecError(ShorthandError):
    def __init__(self, command: str, returncode: Optional[int] = None,
                 stderr: str = "", cause: Optional[BaseException] = None):
        if cause is not None:
            msg = f"shell command failed ({command}): {cause}"
        else:
            msg = f"shell command exited with status {returncode} ({command})"
            if stderr.strip():
                msg = f"{msg}: {stderr.strip()}"
        super().__init__(msg)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.cause = cause


class ConfigError(ShorthandError):
    pass


class ExitRequest(Exception):
    """
    Raised by the exit operator to stop the run loop. Not an error: a
    non-empty message marks the exit as fatal.
    """
    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def status(self) -> int:
        return 1 if self.message else 0


class ImportLineError(ShorthandError):
    """A line inside an imported shorthand file failed to evaluate."""
    def __init__(self, path: str, line_no: int, cause: ShorthandError):
        super().__init__(f"{path} line {line_no}: {cause}")
        self.path = path
        self.line_no = line_no
        self.cause = cause
