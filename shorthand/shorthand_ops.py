"""
Built-in shorthand operators.

Every handler has the signature ``handler(vm, sm) -> SourceMap``: it
receives the parsed line and returns the record to commit. A returned
record with an empty label is not committed. Failures are raised as
ShorthandError subclasses and propagate out of VirtualMachine.eval.

An operator token is built from glyphs, each with a meaning:

    " :" ... ": "  start and end of the token (spacing is part of it)
    =              assign the source as given
    <              read from a file
    {              expand labels
    }              an assignment statement (label, op, source)
    !              run a shell command
    [              render markdown
    >              write to a file
    @              the whole symbol table
"""
from typing import TYPE_CHECKING, Callable, NamedTuple

from shorthand.shorthand_datatypes import SourceMap, ShorthandError, ImportLineError, ExitRequest

if TYPE_CHECKING:
    from shorthand.shorthand_runtime import VirtualMachine

Handler = Callable[["VirtualMachine", SourceMap], SourceMap]

# Label conventionally used with the export-all operators.
IGNORE_LABEL = "_"


# ===================================================================
# Assignments
# ===================================================================

def assign_string(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(sm.source)


def assign_include(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.read_file(sm.source))


def assign_expansion(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.expand(sm.source))


def assign_expand_expansion(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.expand(vm.expand(sm.source)))


def include_expansion(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.expand(vm.read_file(sm.source)))


def assign_shell(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.shell(sm.source))


def assign_expand_shell(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.shell(vm.expand(sm.source)))


def assign_markdown(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.markdown(sm.source).rstrip())


def assign_expand_markdown(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.markdown(vm.expand(sm.source)).rstrip())


def include_markdown(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.markdown(vm.read_file(sm.source)).rstrip())


def include_expand_markdown(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    return sm.with_expanded(vm.markdown(vm.expand(vm.read_file(sm.source))).rstrip())


def import_assignments(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    """Evaluate each line of a shorthand file as if it were fed to the VM.

    Plain text lines are expanded and dropped. The first failing line
    stops the import; assignments made before it stay bound.
    """
    text = vm.read_file(sm.source)
    for line_no, line in enumerate(text.split("\n"), start=1):
        try:
            vm.eval(line, line_no)
        except ShorthandError as e:
            raise ImportLineError(sm.source, line_no, e) from e
    return sm.without_label()


# ===================================================================
# Exports (never change the symbol table)
# ===================================================================

def export_expansion(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    bound = vm.lookup(sm.label)
    vm.write_file(sm.source, bound.expanded)
    return sm.without_label()


def export_expansions(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    vm.write_lines(sm.source, [bound.expanded for bound in vm.symbols.get_all()])
    return sm.without_label()


def export_assignment(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    bound = vm.lookup(sm.label)
    vm.write_file(sm.source, bound.statement())
    return sm.without_label()


def export_assignments(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    vm.write_lines(sm.source, [bound.statement() for bound in vm.symbols.get_all()])
    return sm.without_label()


# ===================================================================
# Control
# ===================================================================

def exit_shorthand(vm: "VirtualMachine", sm: SourceMap) -> SourceMap:
    raise ExitRequest(sm.source.strip())


class OperatorSpec(NamedTuple):
    glyph: str
    keyword: str
    handler: Handler
    help: str


# Registration order is the parser's tie-break order.
BUILTIN_OPERATORS = (
    OperatorSpec(" :=: ", " :set: ", assign_string,
                 "Assign a string to a label"),
    OperatorSpec(" :=<: ", " :import-text: ", assign_include,
                 "Assign the contents of a file to a label"),
    OperatorSpec(" :}<: ", " :import-shorthand: ", import_assignments,
                 "Import the assignments in a shorthand file"),
    OperatorSpec(" :{: ", " :expand: ", assign_expansion,
                 "Assign the expansion of a string to a label"),
    OperatorSpec(" :{{: ", " :expand-expansion: ", assign_expand_expansion,
                 "Assign the expansion of an expanded string to a label"),
    OperatorSpec(" :{<: ", " :import-expansion: ", include_expansion,
                 "Assign the expanded contents of a file to a label"),
    OperatorSpec(" :!: ", " :bash: ", assign_shell,
                 "Assign the output of a shell command to a label"),
    OperatorSpec(" :{!: ", " :expand-bash: ", assign_expand_shell,
                 "Expand a shell command, run it and assign its output to a label"),
    OperatorSpec(" :[: ", " :markdown: ", assign_markdown,
                 "Assign the HTML rendering of markdown to a label"),
    OperatorSpec(" :{[: ", " :expand-markdown: ", assign_expand_markdown,
                 "Expand markdown, render it and assign the HTML to a label"),
    OperatorSpec(" :[<: ", " :import-markdown: ", include_markdown,
                 "Render a markdown file and assign the HTML to a label"),
    OperatorSpec(" :{[<: ", " :import-expand-markdown: ", include_expand_markdown,
                 "Expand a markdown file, render it and assign the HTML to a label"),
    OperatorSpec(" :>: ", " :export-expansion: ", export_expansion,
                 "Write the value of a label to a file"),
    OperatorSpec(" :@>: ", " :export-all-expansions: ", export_expansions,
                 "Write the values of all labels to a file (order is not guaranteed)"),
    OperatorSpec(" :}>: ", " :export-label: ", export_assignment,
                 "Write the assignment statement of a label to a file"),
    OperatorSpec(" :@}>: ", " :export-all-labels: ", export_assignments,
                 "Write all assignment statements to a file (order is not guaranteed)"),
    OperatorSpec(":exit:", ":quit:", exit_shorthand,
                 "Stop processing; any text after the token is reported as a fatal error"),
)

# Substrings that end the run loop wherever they appear in a line.
TERMINATORS = (":exit:", ":quit:")
