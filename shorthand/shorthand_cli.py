"""shorthand command line tool and REPL wiring."""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from shorthand.shorthand_config import load_config
from shorthand.shorthand_datatypes import SourceMap, ShorthandError, ExitRequest
from shorthand.shorthand_help import WELCOME, render_how_it_works
from shorthand.shorthand_runtime import VERSION, VirtualMachine, format_error


def help_shorthand(vm: VirtualMachine, sm: SourceMap) -> SourceMap:
    vm.stdout.write(vm.help_text())
    return SourceMap(op=sm.op, line_no=sm.line_no)


def build_arg_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description=f"{prog} expands labels based on their assigned definitions, "
                    "reading standard input (or FILES) and writing standard output.",
        epilog=render_how_it_works(prog),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Files to process instead of standard input")
    parser.add_argument("-e", dest="expressions", action="append", default=[], metavar="EXPR",
                        help="The shorthand notation(s) you wish to add")
    parser.add_argument("-p", dest="prompt", default=None, help="Output a prompt for interactive processing")
    parser.add_argument("-n", dest="noprompt", action="store_true", help="Turn off the prompt for interactive processing")
    parser.add_argument("-m", "--markdown", action="store_true", default=None,
                        help="Run final output through markdown processor")
    parser.add_argument("-c", "--config", default=None, help="YAML configuration file")
    parser.add_argument("--verbose", action="store_true", help="Log debug information to standard error")
    parser.add_argument("-v", "--version", action="version", version=f"{prog} {VERSION}")
    return parser


def _eval_expressions(vm: VirtualMachine, expressions: List[str]) -> Optional[int]:
    """Evaluate -e expressions in order; returns an exit status to stop with, or None."""
    for line_no, expr in enumerate(expressions, start=1):
        try:
            out = vm.eval(expr, line_no)
        except ExitRequest as req:
            if req.message:
                print(format_error(line_no, req.message), file=sys.stderr)
            return req.status
        except ShorthandError as e:
            print(format_error(line_no, e), file=sys.stderr)
            return 1
        if out:
            print(out)
    return None


def main(argv: Optional[List[str]] = None) -> int:
    prog = "shorthand"
    args = build_arg_parser(prog).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )

    try:
        config = load_config(args.config)
    except ShorthandError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    prompt = config.prompt if args.prompt is None else args.prompt
    if args.noprompt:
        prompt = ""
    markdown = config.post_process_markdown if args.markdown is None else args.markdown

    vm = VirtualMachine(config, prompt=prompt)
    status = _eval_expressions(vm, args.expressions)
    if status is not None:
        return status

    # If filenames are provided use them instead of standard input.
    if args.files:
        vm.set_prompt("")
        failed = False
        for name in args.files:
            try:
                with open(name, "r", encoding=config.encoding) as fp:
                    vm.run(fp, markdown=markdown)
            except OSError as e:
                print(f"Error: {e}", file=sys.stderr)
                failed = True
                continue
            if vm.exit_status:
                return vm.exit_status
        return 1 if failed else 0

    # Interactive use
    vm.register_op(":help:", help_shorthand, "This help message")
    if vm.prompt:
        print(WELCOME)
    try:
        vm.run(sys.stdin, markdown=markdown)
    except KeyboardInterrupt:
        print("\nExiting.")
    return vm.exit_status


if __name__ == "__main__":
    raise SystemExit(main())
