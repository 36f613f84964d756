"""Stack VM execution engine - runs tokenized instructions against an integer stack."""

import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Sequence, TextIO

from stackvm.stackvm_config import DEFAULT_OUTPUT_DELAY
from stackvm.stackvm_error import StackVMRuntimeError
from stackvm.stackvm_instruction import Instruction
from stackvm.stackvm_integer import (
    INT_MIN, parse_literal, truncating_divide, truncating_modulo, wrap
)
from stackvm.stackvm_labels import build_label_table
from stackvm.stackvm_opcode import Opcode
from stackvm.stackvm_trace import TraceRecord


class StackVMTraceWatcher(Protocol):
    """Protocol for stack VM trace watchers."""
    def on_trace(self, record: TraceRecord) -> None:
        """
        Called once for every instruction about to execute.

        Args:
            record: Instruction position, the instruction itself and the stack before it runs
        """


@dataclass
class ExecutionState:
    """
    Mutable state of a single program run.

    The stack is stored bottom first, so the top of the stack is `stack[-1]`.
    """
    instructions: Sequence[Instruction]
    labels: Dict[str, int]
    ip: int = 0  # Instruction pointer
    stack: List[int] = field(default_factory=list)
    halted: bool = False
    steps: int = 0


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a completed run."""
    stack: List[int]
    halted: bool
    steps: int

    @property
    def top(self) -> Optional[int]:
        """Value on top of the stack, or None if the stack is empty."""
        return self.stack[-1] if self.stack else None


Handler = Callable[[ExecutionState, Instruction], None]


class StackVMEngine:
    """
    Executes instruction sequences produced by the tokenizer.

    Stack underflow and jumps to unknown labels are silently ignored. Malformed
    integers, division by zero and missing operands raise StackVMRuntimeError
    and abort the run.
    """

    def __init__(
        self,
        output_delay: float = DEFAULT_OUTPUT_DELAY,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        sleep: Callable[[float], None] | None = None
    ) -> None:
        """
        Initialize the engine.

        Args:
            output_delay: Seconds to wait before each `out` instruction emits its value
            stdin: Stream `read` consumes lines from (defaults to sys.stdin at call time)
            stdout: Stream `out` writes to (defaults to sys.stdout at call time)
            sleep: Function used to wait out the output delay (defaults to time.sleep)
        """
        self.output_delay = output_delay
        self.stdin = stdin
        self.stdout = stdout
        self.sleep = sleep if sleep is not None else time.sleep
        self.trace_watcher: Optional[StackVMTraceWatcher] = None
        self._logger = logging.getLogger("StackVMEngine")
        self._dispatch_table = self._build_dispatch_table()

    def set_trace_watcher(self, watcher: Optional[StackVMTraceWatcher]) -> None:
        """
        Set the trace watcher (replaces any existing watcher).

        Args:
            watcher: StackVMTraceWatcher instance or None to disable tracing
        """
        self.trace_watcher = watcher

    def _build_dispatch_table(self) -> Dict[Opcode, Handler]:
        return {
            Opcode.PUSH: self._op_push,
            Opcode.DROP: self._op_drop,
            Opcode.DUPE: self._op_dupe,
            Opcode.SWAP: self._op_swap,
            Opcode.FREE: self._op_free,
            Opcode.ROTATE: self._op_rotate,
            Opcode.SIZE: self._op_size,
            Opcode.ADD: self._op_binary,
            Opcode.SUB: self._op_binary,
            Opcode.MUL: self._op_binary,
            Opcode.DIV: self._op_binary,
            Opcode.MOD: self._op_binary,
            Opcode.ABS: self._op_abs,
            Opcode.NEG: self._op_neg,
            Opcode.OUT: self._op_out,
            Opcode.READ: self._op_read,
            Opcode.GOTO: self._op_goto,
            Opcode.HALT: self._op_halt,
            Opcode.DEF: self._op_nop,
            Opcode.BLANK: self._op_nop,
            Opcode.INVALID: self._op_invalid,
        }

    def execute(
        self,
        instructions: Sequence[Instruction],
        labels: Dict[str, int] | None = None
    ) -> ExecutionResult:
        """
        Run a tokenized program until it falls off the end or halts.

        Args:
            instructions: Instruction sequence ending in a single EOF marker
            labels: Precomputed label table; built from `instructions` if omitted

        Returns:
            Final stack, halt status and executed step count

        Raises:
            StackVMRuntimeError: On any unrecoverable error
        """
        if not instructions or instructions[-1].opcode is not Opcode.EOF:
            raise StackVMRuntimeError(
                "Instruction sequence is not terminated",
                expected="A trailing EOF instruction, as produced by the tokenizer"
            )

        if labels is None:
            labels = build_label_table(instructions)

        state = ExecutionState(instructions, labels)
        self.run(state)
        return ExecutionResult(list(state.stack), state.halted, state.steps)

    def run(self, state: ExecutionState) -> None:
        """
        Drive `state` to completion.

        Jumps set the instruction pointer to the label's own index; the
        pointer then advances like after any other instruction, so execution
        resumes with the instruction following the label definition.
        """
        dispatch = self._dispatch_table
        instructions = state.instructions

        while True:
            instr = instructions[state.ip]
            if instr.opcode is Opcode.EOF:
                break

            if self.trace_watcher is not None:
                self.trace_watcher.on_trace(TraceRecord(state.ip, instr.line, instr, tuple(state.stack)))

            dispatch[instr.opcode](state, instr)
            state.steps += 1
            if state.halted:
                self._logger.debug("Halted at instruction %d (line %d)", state.ip, instr.line)
                break

            state.ip += 1

    def _error(self, state: ExecutionState, instr: Instruction, message: str, **details: str) -> StackVMRuntimeError:
        return StackVMRuntimeError(message, line=instr.line, index=state.ip, **details)

    def _underflow(self, state: ExecutionState, instr: Instruction, needed: int) -> bool:
        """Return True (and log) if the stack holds fewer than `needed` values."""
        if len(state.stack) >= needed:
            return False

        self._logger.debug(
            "Ignoring '%s' on line %d: needs %d value(s), stack has %d",
            instr.opcode.value, instr.line, needed, len(state.stack)
        )
        return True

    def _parse_integer(self, state: ExecutionState, instr: Instruction, text: str) -> int:
        try:
            return parse_literal(text)

        except ValueError as e:
            raise self._error(
                state, instr, "Invalid integer literal",
                received=repr(text),
                expected="A decimal integer between -2147483648 and 2147483647",
                example="push -42"
            ) from e

    def _op_push(self, state: ExecutionState, instr: Instruction) -> None:
        """PUSH: Parse the argument and push it."""
        text = instr.argument(0)
        if text is None:
            raise self._error(
                state, instr, "push requires an integer argument",
                received=str(instr),
                example="push 5"
            )

        state.stack.append(self._parse_integer(state, instr, text))

    def _op_drop(self, state: ExecutionState, instr: Instruction) -> None:
        """DROP: Discard the top value."""
        if self._underflow(state, instr, 1):
            return

        state.stack.pop()

    def _op_dupe(self, state: ExecutionState, instr: Instruction) -> None:
        """DUPE: Push a copy of the top value."""
        if self._underflow(state, instr, 1):
            return

        state.stack.append(state.stack[-1])

    def _op_swap(self, state: ExecutionState, instr: Instruction) -> None:
        """SWAP: Exchange the top two values."""
        if self._underflow(state, instr, 2):
            return

        stack = state.stack
        stack[-1], stack[-2] = stack[-2], stack[-1]

    def _op_free(self, state: ExecutionState, _instr: Instruction) -> None:
        """FREE: Remove every value."""
        state.stack.clear()

    def _op_rotate(self, state: ExecutionState, _instr: Instruction) -> None:
        """ROTATE: Reverse the whole stack in place."""
        state.stack.reverse()

    def _op_size(self, state: ExecutionState, _instr: Instruction) -> None:
        """SIZE: Push the depth the stack had before this instruction."""
        state.stack.append(wrap(len(state.stack)))

    def _op_binary(self, state: ExecutionState, instr: Instruction) -> None:
        """ADD/SUB/MUL/DIV/MOD: Pop b then a and push `a op b`."""
        if self._underflow(state, instr, 2):
            return

        stack = state.stack
        opcode = instr.opcode
        if opcode in (Opcode.DIV, Opcode.MOD) and stack[-1] == 0:
            raise self._error(
                state, instr, "Division by zero" if opcode is Opcode.DIV else "Modulo by zero",
                context=f"Stack top is 0 when executing '{instr}'",
                suggestion="Check the divisor before dividing, or jump around the division"
            )

        if opcode in (Opcode.DIV, Opcode.MOD) and stack[-1] == -1 and stack[-2] == INT_MIN:
            raise self._error(
                state, instr, "Division overflow",
                received=f"{INT_MIN} {opcode.value} -1",
                context="The quotient of the smallest machine integer and -1 does not fit in a machine integer"
            )

        b = stack.pop()
        a = stack.pop()

        if opcode is Opcode.ADD:
            stack.append(wrap(a + b))

        elif opcode is Opcode.SUB:
            stack.append(wrap(a - b))

        elif opcode is Opcode.MUL:
            stack.append(wrap(a * b))

        elif opcode is Opcode.DIV:
            stack.append(truncating_divide(a, b))

        else:
            stack.append(truncating_modulo(a, b))

    def _op_abs(self, state: ExecutionState, instr: Instruction) -> None:
        """ABS: Replace the top value with its absolute value."""
        if self._underflow(state, instr, 1):
            return

        if state.stack[-1] == INT_MIN:
            raise self._error(
                state, instr, "Absolute value overflow",
                received=str(INT_MIN),
                context="The smallest machine integer has no positive counterpart"
            )

        state.stack[-1] = abs(state.stack[-1])

    def _op_neg(self, state: ExecutionState, instr: Instruction) -> None:
        """NEG: Replace the top value with its negation."""
        if self._underflow(state, instr, 1):
            return

        state.stack[-1] = wrap(-state.stack[-1])

    def _op_out(self, state: ExecutionState, instr: Instruction) -> None:
        """OUT: Wait for the output delay, then print the top value without popping it."""
        if self._underflow(state, instr, 1):
            return

        if self.output_delay > 0:
            self.sleep(self.output_delay)

        stdout = self.stdout if self.stdout is not None else sys.stdout
        stdout.write(f"{state.stack[-1]}\n")
        stdout.flush()

    def _op_read(self, state: ExecutionState, instr: Instruction) -> None:
        """READ: Push an integer read from one input line; blank lines push nothing."""
        stdin = self.stdin if self.stdin is not None else sys.stdin
        text = stdin.readline()
        if not text.strip():
            self._logger.debug("No value supplied to 'read' on line %d", instr.line)
            return

        state.stack.append(self._parse_integer(state, instr, text))

    def _op_goto(self, state: ExecutionState, instr: Instruction) -> None:
        """GOTO: Move the instruction pointer to a label definition."""
        name = instr.argument(0)
        if name is None:
            raise self._error(
                state, instr, "goto requires a label name",
                received=str(instr),
                example="goto loop"
            )

        target = state.labels.get(name)
        if target is None:
            self._logger.debug("Ignoring jump to undefined label '%s' on line %d", name, instr.line)
            return

        state.ip = target

    def _op_halt(self, state: ExecutionState, _instr: Instruction) -> None:
        """HALT: Stop the run."""
        state.halted = True

    def _op_nop(self, _state: ExecutionState, _instr: Instruction) -> None:
        """DEF/BLANK: No runtime effect."""

    def _op_invalid(self, _state: ExecutionState, instr: Instruction) -> None:
        """INVALID: Skip an unrecognised instruction."""
        self._logger.warning("Skipping unknown instruction '%s' on line %d", instr.word, instr.line)
