"""Wizard state machine: Step(1) → Step(2) → … → Step(N).

Transitions:
  advance(raw)  validate the active step; on success merge + mark complete
                and move forward. At the terminal step a successful advance
                fires the exit action instead of moving.
  retreat()     back one step, no validation, completion untouched.
  jump_to(j)    allowed iff j was completed or j < current_step.

Unvalidated input is kept per step, so moving away from a step and back
(or advancing with no body) works from what was last typed there.

There is no error state: a rejected advance leaves the machine where it was
and returns the field errors.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from provider_portal.middleware.exceptions import StepNotReachableError
from provider_portal.schemas.wizard import (
    DraftProfile,
    DraftProfileComplete,
    StepInfo,
    WizardProgress,
    WizardSnapshot,
)
from provider_portal.wizard.aggregator import mark_completed, merge
from provider_portal.wizard.steps import (
    FIRST_STEP,
    REQUIRED_STEPS,
    STEPS,
    TOTAL_STEPS,
    get_step,
    validate_step,
)

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[DraftProfileComplete], None]


@dataclass
class AdvanceResult:
    step: int
    errors: dict[str, str] = field(default_factory=dict)
    # Set only when the terminal step was confirmed
    finished: DraftProfileComplete | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


class WizardController:
    def __init__(
        self,
        snapshot: WizardSnapshot | None = None,
        on_complete: CompletionHandler | None = None,
    ):
        snapshot = snapshot or WizardSnapshot()
        current = snapshot.current_step
        if not FIRST_STEP <= current <= TOTAL_STEPS:
            logger.warning(f"Discarding out-of-range wizard step {current}; restarting at step 1")
            current = FIRST_STEP
        self._current_step = current
        self._completed = sorted(
            {s for s in snapshot.completed_steps if FIRST_STEP <= s <= TOTAL_STEPS}
        )
        self._draft = dict(snapshot.draft)
        self._pending = {
            s: dict(raw)
            for s, raw in snapshot.pending_inputs.items()
            if FIRST_STEP <= s <= TOTAL_STEPS
        }
        self._published_slug = snapshot.published_slug
        self._is_complete = snapshot.is_complete
        self._on_complete = on_complete

    # ── Construction ────────────────────────────────────────

    @classmethod
    def restore(
        cls,
        snapshot: WizardSnapshot | None,
        on_complete: CompletionHandler | None = None,
    ) -> "WizardController":
        return cls(snapshot, on_complete=on_complete)

    @classmethod
    def for_existing_profile(
        cls,
        draft: dict,
        published_slug: str | None = None,
        on_complete: CompletionHandler | None = None,
    ) -> "WizardController":
        """Open an already-published profile for editing.

        Every data step counts as completed, so the user may jump anywhere
        except the terminal step, which is reached by advancing again.
        `published_slug` makes a later publish update that same record.
        """
        snapshot = WizardSnapshot(
            current_step=FIRST_STEP,
            completed_steps=sorted(REQUIRED_STEPS),
            draft=DraftProfile.model_validate(draft).model_dump(exclude_none=True),
            published_slug=published_slug,
        )
        return cls(snapshot, on_complete=on_complete)

    # ── State accessors ─────────────────────────────────────

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def completed_steps(self) -> list[int]:
        return list(self._completed)

    @property
    def draft(self) -> dict:
        return dict(self._draft)

    @property
    def pending_input(self) -> dict | None:
        return self._pending.get(self._current_step)

    @property
    def published_slug(self) -> str | None:
        return self._published_slug

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    def can_reach(self, step: int) -> bool:
        return step in self._completed or step < self._current_step

    def reachable_steps(self) -> list[int]:
        return [s.number for s in STEPS if self.can_reach(s.number)]

    # ── Transitions ─────────────────────────────────────────

    def advance(self, raw: dict | None = None) -> AdvanceResult:
        step = get_step(self._current_step)

        if step.schema is None:
            return self._confirm(step.number)

        submitted = raw if raw is not None else self._pending.get(step.number, {})
        verdict = validate_step(step.number, submitted)
        if not verdict.ok:
            if isinstance(raw, dict):
                self._pending[step.number] = dict(raw)
            logger.debug(f"Step {step.number} rejected: {sorted(verdict.errors)}")
            return AdvanceResult(step=step.number, errors=verdict.errors)

        self._draft = merge(self._draft, step.number, verdict.data)
        self._completed = mark_completed(self._completed, step.number)
        self._pending.pop(step.number, None)
        # Draft changed, so any earlier confirmation no longer holds
        self._is_complete = False
        self._current_step = step.number + 1
        logger.debug(f"Step {step.number} completed; now at step {self._current_step}")
        return AdvanceResult(step=step.number)

    def _confirm(self, step_number: int) -> AdvanceResult:
        missing = sorted(REQUIRED_STEPS - set(self._completed))
        if missing:
            return AdvanceResult(
                step=step_number,
                errors={
                    f"step_{s}": f"Complete step {s} ({get_step(s).title}) first"
                    for s in missing
                },
            )

        verdict = validate_step(step_number, None, draft=self._draft)
        if not verdict.ok:
            return AdvanceResult(step=step_number, errors=verdict.errors)

        finished = DraftProfileComplete.model_validate(verdict.data)
        self._is_complete = True
        self._pending.pop(step_number, None)
        logger.debug("Wizard confirmed")
        if self._on_complete is not None:
            self._on_complete(finished)
        return AdvanceResult(step=step_number, finished=finished)

    def retreat(self) -> int:
        if self._current_step == FIRST_STEP:
            raise StepNotReachableError(FIRST_STEP - 1, self.reachable_steps())
        self._current_step -= 1
        return self._current_step

    def jump_to(self, step: int) -> int:
        if not self.can_reach(step):
            raise StepNotReachableError(step, self.reachable_steps())
        self._current_step = step
        logger.debug(f"Jumped to step {step}")
        return self._current_step

    def save_pending(self, raw: dict) -> None:
        """Keep unvalidated input for the active step (partial save)."""
        self._pending[self._current_step] = dict(raw)

    # ── Serialization ───────────────────────────────────────

    def snapshot(self) -> WizardSnapshot:
        return WizardSnapshot(
            current_step=self._current_step,
            completed_steps=list(self._completed),
            is_complete=self._is_complete,
            draft=dict(self._draft),
            pending_inputs={s: dict(raw) for s, raw in self._pending.items()},
            published_slug=self._published_slug,
        )

    def progress(self) -> WizardProgress:
        reachable = self.reachable_steps()
        return WizardProgress(
            current_step=self._current_step,
            total_steps=TOTAL_STEPS,
            completed_steps=list(self._completed),
            reachable_steps=reachable,
            is_complete=self._is_complete,
            draft=DraftProfile.model_validate(self._draft),
            pending_input=self.pending_input,
            published_slug=self._published_slug,
            steps=[
                StepInfo(
                    number=s.number,
                    key=s.key,
                    title=s.title,
                    completed=s.number in self._completed,
                    reachable=s.number in reachable,
                )
                for s in STEPS
            ],
        )
