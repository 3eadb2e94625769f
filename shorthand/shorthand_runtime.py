# shorthand_runtime.py

import logging
import sys
from typing import Dict, List, Optional, TextIO

from shorthand.shorthand_datatypes import (
    SourceMap, ShorthandError, DuplicateOperatorError, UnknownOperatorError,
    ParseMismatchError, ExitRequest,
)
from shorthand.shorthand_symbols import SymbolTable
from shorthand.shorthand_ops import BUILTIN_OPERATORS, TERMINATORS, Handler
from shorthand.shorthand_config import Config
from shorthand import shorthand_file, shorthand_shell, shorthand_markdown

logger = logging.getLogger(__name__)

VERSION = "v0.0.5"


def format_error(line_no: int, err: BaseException) -> str:
    """The user-facing diagnostic for a failed line."""
    return f"ERROR ({line_no}): {err}"


class VirtualMachine:
    """Parses, evaluates and expands shorthand.

    Each VM owns its own symbol table and operator registry, so several
    machines can coexist in one process.
    """

    def __init__(self, config: Optional[Config] = None, *, prompt: str = "",
                 stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None,
                 builtins: bool = True):
        self.config = config or Config()
        self.symbols = SymbolTable()
        self.operators: Dict[str, Handler] = {}
        self.help: Dict[str, str] = {}
        # Tokens in registration order; the parser walks this list.
        self.ops: List[str] = []
        self.prompt = prompt
        self.exit_status = 0
        self._stdout = stdout
        self._stderr = stderr

        if builtins:
            for spec in BUILTIN_OPERATORS:
                self.register_op(spec.glyph, spec.handler, spec.help)
                self.register_op(spec.keyword, spec.handler, spec.help)

    # Resolved on use so redirected sys.stdout/sys.stderr are honoured.
    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def set_prompt(self, prompt: str):
        self.prompt = prompt

    # ===================================================================
    # Operator registry
    # ===================================================================

    def register_op(self, op: str, callback: Handler, help: str = ""):
        """Associate an operator token with its handler."""
        if op in self.operators:
            raise DuplicateOperatorError(op)
        self.operators[op] = callback
        self.help[op] = help
        self.ops.append(op)
        logger.debug("registered operator %r", op)

    # ===================================================================
    # Parsing
    # ===================================================================

    def parse(self, line: str, line_no: int) -> SourceMap:
        """Split a line into label, operator and source.

        The operator occurring earliest in the line wins; when two tokens
        start at the same position the one registered first wins. Lines
        without any operator come back with an empty label and op and the
        whole line as the source.
        """
        best_pos, best_op = -1, ""
        for op in self.ops:
            pos = line.find(op)
            if pos != -1 and (best_pos == -1 or pos < best_pos):
                best_pos, best_op = pos, op
        if best_pos == -1:
            return SourceMap(source=line, line_no=line_no)
        return SourceMap(
            label=line[:best_pos].strip(),
            op=best_op,
            source=line[best_pos + len(best_op):].rstrip(),
            line_no=line_no,
        )

    def parse_strict(self, line: str, line_no: int) -> SourceMap:
        sm = self.parse(line, line_no)
        if not sm.is_assignment:
            raise ParseMismatchError(line, line_no)
        return sm

    def is_assignment(self, text: str) -> bool:
        return any(op in text for op in self.ops)

    def has_assignment(self, label: str) -> bool:
        return label in self.symbols

    # ===================================================================
    # Evaluation
    # ===================================================================

    def eval(self, line: str, line_no: int) -> str:
        """Evaluate one line.

        Assignments return "" and may bind a label; any other line is
        returned with its labels expanded. Handler errors propagate.
        """
        sm = self.parse(line, line_no)
        if not sm.label and not sm.op:
            return self.expand(line)

        callback = self.operators.get(sm.op)
        if callback is None:
            raise UnknownOperatorError(sm.op, line)

        logger.debug("line %d: %r %r", line_no, sm.label, sm.op)
        result = callback(self, sm)
        if result.label:
            self.symbols.set(result)
        return ""

    def expand(self, text: str) -> str:
        """Replace every bound label found in `text` with its value.

        Each label is checked against the input text and replaced in
        the running result, once. Values are not rescanned, so a label
        introduced by another label's value stays as written.
        """
        result = text
        for sm in self.symbols.get_all():
            if sm.label and sm.label in text:
                result = result.replace(sm.label, sm.expanded)
        return result

    def lookup(self, label: str) -> SourceMap:
        if label not in self.symbols:
            logger.warning("label %r is not bound", label)
        return self.symbols.get(label)

    # ===================================================================
    # Collaborators, configured from self.config
    # ===================================================================

    def read_file(self, name: str) -> str:
        return shorthand_file.read_text(name, base_dir=self.config.base_dir, encoding=self.config.encoding)

    def write_file(self, name: str, data: str):
        shorthand_file.write_text(name, data, base_dir=self.config.base_dir, encoding=self.config.encoding)

    def write_lines(self, name: str, lines: List[str]):
        shorthand_file.write_lines(name, lines, base_dir=self.config.base_dir, encoding=self.config.encoding)

    def shell(self, command: str) -> str:
        return shorthand_shell.run_shell(
            command,
            shell=self.config.shell,
            timeout=self.config.shell_timeout,
            cwd=self.config.base_dir,
            encoding=self.config.encoding,
        )

    def markdown(self, src: str) -> str:
        return shorthand_markdown.markdown_to_html(src, self.config.markdown_extensions)

    # ===================================================================
    # Run loop
    # ===================================================================

    def run(self, stream: TextIO, markdown: bool = False) -> int:
        """Read and evaluate lines until end of stream or :exit:/:quit:.

        Errors are reported per line and processing continues. With
        `markdown` set, output is collected and rendered as one markdown
        document at the end. Returns the number of lines read.
        """
        self.exit_status = 0
        collected: List[str] = []
        line_no = 0
        while True:
            if self.prompt:
                self.stdout.write(self.prompt)
                self.stdout.flush()
            src = stream.readline()
            if src == "":
                break
            line_no += 1
            if any(t in src for t in TERMINATORS):
                break
            try:
                out = self.eval(src, line_no)
            except ExitRequest as req:
                # Raised from an imported file; the line itself had no terminator.
                if req.message:
                    self.stderr.write(format_error(line_no, req.message) + "\n")
                self.exit_status = req.status
                break
            except ShorthandError as e:
                self.stderr.write(format_error(line_no, e) + "\n")
                continue
            if out:
                if markdown:
                    collected.append(out)
                else:
                    self.stdout.write(out)
        if markdown and collected:
            self.stdout.write(self.markdown("".join(collected)))
        self.stdout.flush()
        return line_no

    def help_text(self) -> str:
        from shorthand.shorthand_help import render_operator_help
        return render_operator_help(self)
