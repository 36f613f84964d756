"""
Command-line interface for the stack virtual machine.
"""

import argparse
import logging
import sys
from typing import List

from stackvm.stackvm import StackVM
from stackvm.stackvm_config import StackVMConfig
from stackvm.stackvm_error import StackVMConfigError, StackVMRuntimeError
from stackvm.stackvm_printer import format_instructions, format_labels


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="stackvm",
        description="Run a line-oriented stack machine program",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s program.svm                   # Run a program
  %(prog)s program.svm --delay 0         # Run without the output delay
  %(prog)s program.svm --trace           # Trace every instruction to stderr
  %(prog)s program.svm --list --labels   # Show tokens and labels, then exit
        """
    )
    parser.add_argument('program', help='Program file to run')
    parser.add_argument('--config', '-c', help='YAML configuration file')
    parser.add_argument('--delay', type=float,
                        help='Seconds to wait before each output (default 0.4)')
    parser.add_argument('--trace', '-t', action='store_true',
                        help='Trace each executed instruction to stderr')
    parser.add_argument('--trace-file', help='Write the instruction trace to a file')
    parser.add_argument('--list', '-l', action='store_true', dest='list_instructions',
                        help='Print the tokenized program and exit')
    parser.add_argument('--labels', action='store_true',
                        help='Print the label table and exit')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose (debug) logging on stderr')
    return parser


def load_config(args: argparse.Namespace) -> StackVMConfig:
    """Combine the configuration file (if any) with command-line overrides."""
    config = StackVMConfig.load_from_file(args.config) if args.config else StackVMConfig()

    if args.delay is not None:
        config.output_delay = args.delay

    if args.trace:
        config.trace = True

    if args.trace_file:
        config.trace_file = args.trace_file

    if args.verbose:
        config.log_level = "DEBUG"

    config.validate()
    return config


def main(argv: List[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)

    except (StackVMConfigError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )

    vm = StackVM(config)

    try:
        if args.list_instructions or args.labels:
            source = vm.read_program(args.program)
            if args.list_instructions:
                print(format_instructions(vm.tokenize(source)))

            if args.labels:
                print(format_labels(vm.labels(source)))

            return 0

        vm.run_file(args.program)

    except OSError as e:
        print(f"Cannot read program '{args.program}': {e}", file=sys.stderr)
        return 2

    except StackVMConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except StackVMRuntimeError as e:
        print(str(e), file=sys.stderr)
        return 1

    return 0
