"""Shared fixtures and utilities for stack VM tests."""

import io
from typing import Callable, List

import pytest

from stackvm import StackVM, StackVMConfig
from stackvm.stackvm_vm import ExecutionResult


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def stdout():
    """In-memory stream that receives `out` output."""
    return io.StringIO()


@pytest.fixture
def sleep():
    """Recorder for output delays."""
    return RecordingSleep()


@pytest.fixture
def vm_factory(stdout, sleep) -> Callable[..., StackVM]:
    """Factory for VMs wired to in-memory streams and a recording sleep."""
    def _create_vm(stdin_text: str = "", output_delay: float = 0.4) -> StackVM:
        config = StackVMConfig(output_delay=output_delay)
        return StackVM(config, stdin=io.StringIO(stdin_text), stdout=stdout, sleep=sleep)
    return _create_vm


@pytest.fixture
def vm(vm_factory):
    """Create a fresh VM with no pending input."""
    return vm_factory()


class StackVMTestHelpers:
    """Helper utilities for stack VM testing."""

    @staticmethod
    def top_first(result: ExecutionResult) -> List[int]:
        """Return the final stack listed from the top down."""
        return list(reversed(result.stack))

    @staticmethod
    def program(*lines: str) -> str:
        """Join instruction lines into program text."""
        return "\n".join(lines)


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return StackVMTestHelpers
