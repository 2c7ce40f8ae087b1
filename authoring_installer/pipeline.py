from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from .application import Application
from .config_collector import ConfigRecord
from .errors import InstallError, PersistenceError
from .lib.framework import FrameworkSource
from .lib.prompt import Prompter
from .modes import InstallMode, Phase
from .run_state import RunState

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Installation completed successfully, the application can now be started with 'node server'."
UNEXPECTED_MESSAGE = "Install was unsuccessful. Please check the console output."

AppFactory = Callable[[ConfigRecord], Application]


@dataclass(frozen=True)
class InstallCtx:
    """Run-wide inputs shared by every step. Never mutated during a run."""

    mode: InstallMode
    root_dir: Path
    prompter: Prompter
    framework: FrameworkSource
    app_factory: AppFactory
    overrides: Mapping[str, Any] = field(default_factory=dict)
    build_command: Optional[Sequence[str]] = ("grunt", "build:prod")

    @property
    def interactive(self) -> bool:
        return self.mode.is_interactive


class Step(Protocol):
    step_id: str
    phase: Phase

    def run(self, ctx: InstallCtx, state: RunState) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    exit_code: int
    message: str
    phase: Phase
    failed_phase: Optional[Phase] = None
    rollback_errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def rollback(state: RunState) -> List[str]:
    """Delete the tenant and user created in this run.

    Both deletions are attempted whatever happens to the other one; failures
    are logged and returned, never raised.
    """

    errors: List[str] = []
    app = state.app
    if app is None or (state.tenant is None and state.user is None):
        return errors

    if state.tenant is not None:
        try:
            app.tenants.delete(state.tenant.id)
            logger.info("Rollback: deleted tenant %s", state.tenant.id)
        except Exception as e:
            logger.error("Rollback: failed to delete tenant %s: %s", state.tenant.id, e)
            errors.append(f"tenant {state.tenant.id}: {e}")

    if state.user is not None:
        try:
            app.users.delete(state.user.id)
            logger.info("Rollback: deleted user %s", state.user.id)
        except Exception as e:
            logger.error("Rollback: failed to delete user %s: %s", state.user.id, e)
            errors.append(f"user {state.user.id}: {e}")

    return errors


def run_pipeline(*, ctx: InstallCtx, steps: Sequence[Step], state: Optional[RunState] = None) -> PipelineResult:
    """Run steps in order, stopping at the first failure.

    A failure moves the run to Aborted and rolls back what this run created.
    PersistenceError is re-raised untouched: it can only escape from the first
    configuration save, before anything exists to roll back.
    """

    state = state or RunState()

    for step in steps:
        state.phase = step.phase
        logger.info("Running step %s (%s)", step.step_id, step.phase.value)
        try:
            step.run(ctx, state)
        except PersistenceError as e:
            state.phase = Phase.ABORTED
            ctx.prompter.say(f"ERROR: {e}")
            logger.error("Step %s could not persist configuration", step.step_id)
            raise
        except InstallError as e:
            ctx.prompter.say(f"ERROR: {e}")
            return _abort(state, step, e.message, e)
        except Exception as e:
            logger.exception("Step %s failed unexpectedly", step.step_id)
            ctx.prompter.say(f"ERROR: {e}")
            return _abort(state, step, UNEXPECTED_MESSAGE, e)
        state.completed.append(step.step_id)

    state.phase = Phase.DONE
    logger.info("Install finished: %s", state.summary())
    return PipelineResult(exit_code=0, message=SUCCESS_MESSAGE, phase=state.phase)


def _abort(state: RunState, step: Step, message: str, error: BaseException) -> PipelineResult:
    failed = state.phase
    state.phase = Phase.ABORTED
    logger.error("Step %s failed in %s: %s", step.step_id, failed.value, error)
    rollback_errors = rollback(state)
    return PipelineResult(
        exit_code=1,
        message=message,
        phase=state.phase,
        failed_phase=failed,
        rollback_errors=rollback_errors,
    )


def summarize(result: PipelineResult, state: RunState) -> Dict[str, Any]:
    out = state.summary()
    out["exit_code"] = result.exit_code
    if result.failed_phase is not None:
        out["failed_phase"] = result.failed_phase.value
    if result.rollback_errors:
        out["rollback_errors"] = list(result.rollback_errors)
    return out
