"""Stack virtual machine package: a line-oriented integer stack machine."""

# Main API
from stackvm.stackvm import StackVM
from stackvm.stackvm_config import StackVMConfig

# Exceptions
from stackvm.stackvm_error import StackVMError, StackVMRuntimeError, StackVMConfigError

# Lower-level components
from stackvm.stackvm_instruction import Instruction
from stackvm.stackvm_labels import build_label_table
from stackvm.stackvm_opcode import Opcode
from stackvm.stackvm_tokenizer import StackVMTokenizer
from stackvm.stackvm_trace import (
    StackVMRecordingTraceWatcher, StackVMStreamTraceWatcher, TraceRecord
)
from stackvm.stackvm_vm import ExecutionResult, ExecutionState, StackVMEngine


__all__ = [
    # Main API
    "StackVM", "StackVMConfig",

    # Exceptions
    "StackVMError", "StackVMRuntimeError", "StackVMConfigError",

    # Lower-level components
    "Instruction", "Opcode", "StackVMTokenizer", "build_label_table",
    "ExecutionResult", "ExecutionState", "StackVMEngine",
    "StackVMRecordingTraceWatcher", "StackVMStreamTraceWatcher", "TraceRecord",
]
