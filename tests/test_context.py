"""Tests for the execution context and runner settings."""

import threading

import pytest
from pydantic import ValidationError

from nepo.interpret import BlockFault, ExecutionContext, RunState
from nepo.settings import RunnerSettings


class TestExecutionContext:
    def test_fresh_context_is_running(self):
        ctx = ExecutionContext()
        assert ctx.running
        assert ctx.state is RunState.RUNNING
        assert ctx.variables == {}
        assert ctx.faults == []

    def test_stop(self):
        ctx = ExecutionContext()
        ctx.stop()
        assert not ctx.running
        assert ctx.state is RunState.STOPPED

    def test_stop_is_idempotent(self):
        ctx = ExecutionContext()
        ctx.stop()
        ctx.stop()
        assert ctx.state is RunState.STOPPED

    def test_stop_from_another_thread(self):
        ctx = ExecutionContext()
        worker = threading.Thread(target=ctx.stop)
        worker.start()
        worker.join(timeout=5)
        assert not ctx.running

    def test_defaults(self):
        ctx = ExecutionContext()
        assert ctx.poll_interval_ms == 50
        assert ctx.max_depth == 64

    def test_custom_sleep(self):
        calls = []
        ctx = ExecutionContext(sleep=calls.append)
        ctx.sleep(10)
        assert calls == [10]

    def test_elapsed_since_start(self):
        ticks = iter([100.0, 100.25, 101.5])
        ctx = ExecutionContext(clock=lambda: next(ticks))
        assert ctx.elapsed_ms() == 250.0
        assert ctx.elapsed_ms() == 1500.0


class TestBlockFault:
    def test_fields(self):
        fault = BlockFault(block_type="robActions_motor_on", error_type="HardwareError", message="bad port")
        assert fault.block_id is None
        assert fault.model_dump()["message"] == "bad port"

    def test_block_type_may_be_unknown(self):
        assert BlockFault(block_type=None, error_type="X", message="").block_type is None


class TestRunnerSettings:
    def test_defaults(self):
        settings = RunnerSettings()
        assert settings.poll_interval_ms == 50
        assert settings.max_depth == 64
        assert not settings.dry_run

    def test_rejects_non_positive_poll(self):
        with pytest.raises(ValidationError):
            RunnerSettings(poll_interval_ms=0)

    def test_rejects_zero_depth(self):
        with pytest.raises(ValidationError):
            RunnerSettings(max_depth=0)
