from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence

from .config import InstallerConfig
from .errors import ProvisionError
from .lib.command import CommandRunner
from .logging_utils import log_step
from .probe import InstallationState
from .state_store import record_outcome, record_warning

logger = logging.getLogger(__name__)

SATISFIED = "satisfied"
CONVERGED = "converged"
WARNED = "warned"


@dataclass(frozen=True)
class ProvisionContext:
    config: InstallerConfig
    runner: CommandRunner
    installation: InstallationState
    mode: str
    dry_run: bool = False


@dataclass
class StepResult:
    outcome: str
    warnings: List[str] = field(default_factory=list)


def satisfied(*warnings: str) -> StepResult:
    return StepResult(SATISFIED, list(warnings))


def converged(*warnings: str) -> StepResult:
    return StepResult(CONVERGED, list(warnings))


class Step(Protocol):
    """A single idempotent convergence step."""

    step_id: str
    description: str
    critical: bool

    def run(self, ctx: ProvisionContext) -> StepResult:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    outcomes: Dict[str, str]
    warnings: List[str]


def run_pipeline(
    *,
    ctx: ProvisionContext,
    state: Dict[str, Any],
    steps: Sequence[Step],
) -> PipelineResult:
    """Run every step in order.

    A failing critical step aborts the run with ProvisionError (nothing is
    rolled back). A failing best-effort step is logged as a warning and the
    run continues.
    """

    outcomes: Dict[str, str] = {}
    warnings: List[str] = []

    for step in steps:
        state.setdefault("execution", {})["current_step"] = step.step_id
        log_step(logger, "%s...", step.description)

        try:
            result = step.run(ctx)
        except Exception as e:
            if step.critical:
                logger.error("Step %s failed: %s", step.step_id, e)
                raise ProvisionError(step.step_id, str(e)) from e
            result = StepResult(WARNED, [f"{step.description} failed: {e}"])

        for msg in result.warnings:
            logger.warning("%s", msg)
            record_warning(state, step.step_id, msg)
            warnings.append(msg)

        outcomes[step.step_id] = result.outcome
        record_outcome(state, step.step_id, result.outcome)
        logger.info("Step %s: %s", step.step_id, result.outcome)

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, outcomes=outcomes, warnings=warnings)
