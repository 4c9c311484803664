import pytest

from macemu_installer.errors import ProvisionError
from macemu_installer.pipeline import CONVERGED, SATISFIED, WARNED, StepResult, converged, run_pipeline, satisfied


class RecordingStep:
    def __init__(self, step_id, log, *, critical=True, result=None, error=None):
        self.step_id = step_id
        self.description = f"Running {step_id}"
        self.critical = critical
        self._log = log
        self._result = result or converged()
        self._error = error

    def run(self, ctx) -> StepResult:
        self._log.append(self.step_id)
        if self._error is not None:
            raise self._error
        return self._result


def test_steps_run_in_declared_order(ctx):
    log = []
    steps = [RecordingStep("a", log), RecordingStep("b", log, result=satisfied()), RecordingStep("c", log)]

    result = run_pipeline(ctx=ctx, state={}, steps=steps)

    assert log == ["a", "b", "c"]
    assert result.outcomes == {"a": CONVERGED, "b": SATISFIED, "c": CONVERGED}
    assert result.state["execution"]["current_step"] is None


def test_critical_failure_aborts_remaining_steps(ctx):
    log = []
    state = {}
    steps = [
        RecordingStep("a", log),
        RecordingStep("b", log, error=RuntimeError("disk full")),
        RecordingStep("c", log),
    ]

    with pytest.raises(ProvisionError, match="disk full") as exc:
        run_pipeline(ctx=ctx, state=state, steps=steps)

    assert exc.value.step_id == "b"
    assert log == ["a", "b"]
    assert state["execution"]["current_step"] == "b"


def test_best_effort_failure_becomes_warning(ctx):
    log = []
    state = {}
    steps = [
        RecordingStep("download", log, critical=False, error=RuntimeError("404")),
        RecordingStep("after", log),
    ]

    result = run_pipeline(ctx=ctx, state=state, steps=steps)

    assert log == ["download", "after"]
    assert result.outcomes["download"] == WARNED
    assert len(result.warnings) == 1 and "404" in result.warnings[0]
    assert state["execution"]["warnings"][0]["step"] == "download"


def test_step_warnings_are_collected(ctx):
    steps = [RecordingStep("svc", [], result=converged("Could not start service"))]

    result = run_pipeline(ctx=ctx, state={}, steps=steps)

    assert result.outcomes["svc"] == CONVERGED
    assert result.warnings == ["Could not start service"]
