"""Instruction tracing for the stack VM.

The engine hands every watcher a `TraceRecord` just before an instruction
executes. Watchers decide how to present or keep it.
"""

import sys
from dataclasses import dataclass
from typing import List, TextIO, Tuple

from stackvm.stackvm_instruction import Instruction


@dataclass(frozen=True)
class TraceRecord:
    """Snapshot of the machine taken before one instruction executes."""
    index: int
    line: int
    instruction: Instruction
    stack: Tuple[int, ...]  # Bottom first

    def __str__(self) -> str:
        stack = " ".join(str(value) for value in self.stack)
        return f"[{self.index}] line {self.line}: {self.instruction} | stack=[{stack}]"


class StackVMStreamTraceWatcher:
    """
    Writes one formatted line per record to a text stream.

    With no stream given, records go to whatever `sys.stderr` is at the time
    they are written, so program output on stdout stays clean.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    def on_trace(self, record: TraceRecord) -> None:
        stream = self.stream if self.stream is not None else sys.stderr
        stream.write(f"{record}\n")
        stream.flush()


class StackVMRecordingTraceWatcher:
    """Keeps every record so a run can be inspected afterwards."""

    def __init__(self) -> None:
        self.records: List[TraceRecord] = []

    def on_trace(self, record: TraceRecord) -> None:
        self.records.append(record)

    @property
    def indexes(self) -> List[int]:
        """Instruction indexes in execution order."""
        return [record.index for record in self.records]

    def lines(self) -> List[str]:
        """Records formatted the way the stream watcher writes them."""
        return [str(record) for record in self.records]
