"""
Help documents for the shorthand tool, rendered with Mustache.
"""
from textwrap import dedent
from typing import TYPE_CHECKING

import pystache

if TYPE_CHECKING:
    from shorthand.shorthand_runtime import VirtualMachine

OPERATOR_HELP = dedent("""
    The following operators are supported in shorthand:

    {{#operators}}
    	{{token}}	{{help}}
    {{/operators}}

    shorthand {{version}}
    """)

HOW_IT_WORKS = dedent("""
    {{name}} expands labels based on their assigned definitions. The
    rendered output is the transformed text without the definitions
    themselves. The basic definition form is

        LABEL :=: VALUE

    When the label is encountered in the text outside of a definition
    the label is replaced with its value. To create a shorthand for the
    label "ACME" with the value "the point at which someone or something
    is best" write

        ACME :=: the point at which someone or something is best

    and each later "ACME" in the text is replaced with the phrase.

    Supported operators (glyph and keyword forms):

    {{#operators}}
        LABEL{{glyph}}SOURCE
        LABEL{{keyword}}SOURCE
            {{help}}

    {{/operators}}
    If the label is an underscore it is ignored; use it with the
    export-all operators.

    EXAMPLE

        {{name}} -e "@now :!: date +%H:%M" \\
            -e "@today :!: date +%Y-%m-%d" < input.txt > output.txt
    """)

WELCOME = dedent("""
      Welcome to shorthand the simple label expander and markdown processor.
      Use ':exit:' to quit the repl, ':help:' to get a list of supported operators.

    """)


def _renderer() -> pystache.Renderer:
    # Plain text output; nothing to HTML-escape.
    return pystache.Renderer(escape=lambda u: u)


def render_operator_help(vm: "VirtualMachine") -> str:
    from shorthand.shorthand_runtime import VERSION
    context = {
        "operators": [{"token": op.strip(), "help": vm.help.get(op, "")} for op in vm.ops],
        "version": VERSION,
    }
    return _renderer().render(OPERATOR_HELP, context)


def render_how_it_works(name: str = "shorthand") -> str:
    from shorthand.shorthand_ops import BUILTIN_OPERATORS
    context = {
        "name": name,
        "operators": [
            {"glyph": spec.glyph if spec.glyph.startswith(" ") else f" {spec.glyph} ",
             "keyword": spec.keyword if spec.keyword.startswith(" ") else f" {spec.keyword} ",
             "help": spec.help}
            for spec in BUILTIN_OPERATORS
        ],
    }
    return _renderer().render(HOW_IT_WORKS, context)
