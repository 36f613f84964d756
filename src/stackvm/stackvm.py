"""Main StackVM class tying together the tokenizer, label table and engine."""

import logging
from typing import Callable, Dict, Iterable, List, TextIO

from stackvm.stackvm_config import StackVMConfig
from stackvm.stackvm_error import StackVMConfigError
from stackvm.stackvm_instruction import Instruction
from stackvm.stackvm_labels import build_label_table
from stackvm.stackvm_tokenizer import StackVMTokenizer
from stackvm.stackvm_trace import StackVMStreamTraceWatcher
from stackvm.stackvm_vm import ExecutionResult, StackVMEngine, StackVMTraceWatcher


class StackVM:
    """
    Line-oriented stack virtual machine.

    Programs are plain text with one instruction per line, for example:

        push 5
        push 3
        add
        out

    Each run starts with an empty stack; nothing persists between runs.
    """

    def __init__(
        self,
        config: StackVMConfig | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        sleep: Callable[[float], None] | None = None
    ) -> None:
        """
        Initialize the virtual machine.

        Args:
            config: Runtime settings (defaults apply if omitted)
            stdin: Stream used by `read` (defaults to sys.stdin)
            stdout: Stream used by `out` (defaults to sys.stdout)
            sleep: Function used for the output delay (defaults to time.sleep)
        """
        self.config = config if config is not None else StackVMConfig()
        self.tokenizer = StackVMTokenizer()
        self.engine = StackVMEngine(
            output_delay=self.config.output_delay,
            stdin=stdin,
            stdout=stdout,
            sleep=sleep
        )
        self._logger = logging.getLogger("StackVM")

    def set_trace_watcher(self, watcher: StackVMTraceWatcher | None) -> None:
        """Attach a trace watcher to the engine (None disables tracing)."""
        self.engine.set_trace_watcher(watcher)

    def tokenize(self, source: str) -> List[Instruction]:
        """Tokenize program text without running it."""
        return self.tokenizer.tokenize_source(source)

    def labels(self, source: str) -> Dict[str, int]:
        """Build the label table for program text without running it."""
        return build_label_table(self.tokenize(source))

    def run(self, source: str) -> ExecutionResult:
        """
        Tokenize and execute program text.

        Args:
            source: Program text, one instruction per line

        Returns:
            The final stack, whether the program halted, and the number of executed steps

        Raises:
            StackVMRuntimeError: If the program hits an unrecoverable error
        """
        return self.run_lines(source.splitlines())

    def run_lines(self, lines: Iterable[str]) -> ExecutionResult:
        """
        Tokenize and execute a sequence of program lines.

        Raises:
            StackVMRuntimeError: If the program hits an unrecoverable error
            StackVMConfigError: If the configured trace file cannot be opened
        """
        instructions = self.tokenizer.tokenize(lines)
        labels = build_label_table(instructions)
        self._logger.debug("Running %d instruction(s) with %d label(s)", len(instructions) - 1, len(labels))

        if self.engine.trace_watcher is None and self.config.trace_file:
            with self._open_trace_file(self.config.trace_file) as trace_file:
                self.engine.set_trace_watcher(StackVMStreamTraceWatcher(trace_file))
                try:
                    return self.engine.execute(instructions, labels)

                finally:
                    self.engine.set_trace_watcher(None)

        if self.engine.trace_watcher is None and self.config.trace:
            self.engine.set_trace_watcher(StackVMStreamTraceWatcher())

        return self.engine.execute(instructions, labels)

    def _open_trace_file(self, path: str) -> TextIO:
        try:
            return open(path, 'w', encoding='utf-8')

        except OSError as e:
            raise StackVMConfigError(
                f"Cannot open trace file '{path}'",
                context=e.strerror,
                suggestion="Point trace_file at a writable location"
            ) from e

    @staticmethod
    def read_program(path: str) -> str:
        """Read program text from a file."""
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def run_file(self, path: str) -> ExecutionResult:
        """Read a program file and execute it."""
        return self.run(self.read_program(path))
