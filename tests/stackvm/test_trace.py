"""Tests for instruction tracing."""

import io

import pytest

from stackvm import (
    Opcode, StackVM, StackVMConfig, StackVMConfigError, StackVMRecordingTraceWatcher, StackVMRuntimeError,
    StackVMStreamTraceWatcher
)


class TestTrace:
    """Test trace records and the watchers that consume them."""

    def test_records_capture_state_before_each_instruction(self, vm, helpers):
        watcher = StackVMRecordingTraceWatcher()
        vm.set_trace_watcher(watcher)

        vm.run(helpers.program("push 5", "", "push 3", "add"))

        records = watcher.records
        assert [r.index for r in records] == [0, 1, 2, 3]
        assert [r.line for r in records] == [1, 2, 3, 4]
        assert [r.instruction.opcode for r in records] == [Opcode.PUSH, Opcode.BLANK, Opcode.PUSH, Opcode.ADD]
        assert [r.stack for r in records] == [(), (5,), (5,), (5, 3)]

    def test_record_stack_is_a_snapshot(self, vm):
        watcher = StackVMRecordingTraceWatcher()
        vm.set_trace_watcher(watcher)

        vm.run("push 1\npush 2\nfree")

        assert watcher.records[-1].stack == (1, 2)

    def test_formatted_lines(self, vm, helpers):
        watcher = StackVMRecordingTraceWatcher()
        vm.set_trace_watcher(watcher)

        vm.run(helpers.program("push 5", "PUSH 3", "bogus", "add"))

        assert watcher.lines() == [
            "[0] line 1: push 5 | stack=[]",
            "[1] line 2: push 3 | stack=[5]",
            "[2] line 3: bogus | stack=[5 3]",
            "[3] line 4: add | stack=[5 3]",
        ]

    def test_end_marker_is_not_traced(self, vm):
        watcher = StackVMRecordingTraceWatcher()
        vm.set_trace_watcher(watcher)

        vm.run("")

        assert watcher.records == []

    def test_detach_watcher(self, vm):
        watcher = StackVMRecordingTraceWatcher()
        vm.set_trace_watcher(watcher)
        vm.run("push 1")
        vm.set_trace_watcher(None)
        vm.run("push 2")

        assert watcher.indexes == [0]

    def test_stream_watcher(self, vm):
        stream = io.StringIO()
        vm.set_trace_watcher(StackVMStreamTraceWatcher(stream))

        vm.run("push 1\ndrop")

        assert stream.getvalue() == "[0] line 1: push 1 | stack=[]\n[1] line 2: drop | stack=[1]\n"

    def test_config_trace_goes_to_stderr(self, capsys):
        vm = StackVM(StackVMConfig(output_delay=0, trace=True))

        vm.run("push 1\nout")

        captured = capsys.readouterr()
        assert captured.out == "1\n"
        assert "[1] line 2: out | stack=[1]" in captured.err

    def test_config_trace_file(self, tmp_path, stdout, sleep):
        trace_path = tmp_path / "trace.log"
        vm = StackVM(StackVMConfig(trace_file=str(trace_path)), stdout=stdout, sleep=sleep)

        vm.run("push 2\nneg")

        assert trace_path.read_text(encoding="utf-8").splitlines() == [
            "[0] line 1: push 2 | stack=[]",
            "[1] line 2: neg | stack=[2]",
        ]
        assert vm.engine.trace_watcher is None

    def test_trace_file_is_closed_after_runtime_error(self, tmp_path, stdout, sleep):
        trace_path = tmp_path / "trace.log"
        vm = StackVM(StackVMConfig(trace_file=str(trace_path)), stdout=stdout, sleep=sleep)

        with pytest.raises(StackVMRuntimeError):
            vm.run("push 1\npush 0\ndiv")

        assert trace_path.read_text(encoding="utf-8").splitlines()[-1] == "[2] line 3: div | stack=[1 0]"
        assert vm.engine.trace_watcher is None

    def test_unwritable_trace_file(self, tmp_path, stdout, sleep):
        trace_path = tmp_path / "missing-dir" / "trace.log"
        vm = StackVM(StackVMConfig(trace_file=str(trace_path)), stdout=stdout, sleep=sleep)

        with pytest.raises(StackVMConfigError, match="Cannot open trace file"):
            vm.run("push 1")
