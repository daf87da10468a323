"""Fold validated step data into the cumulative draft.

Both helpers return new objects and never mutate their inputs, so a caller
holding the prior draft (e.g. for an in-flight request) keeps a consistent
copy.
"""

from provider_portal.wizard.steps import get_step


def merge(prior_draft: dict, step_number: int, validated: dict) -> dict:
    """Shallow-merge one step's validated fields over the prior draft.

    Only fields owned by the step are taken from `validated`; everything
    else in the prior draft is preserved. Re-submitting a step overwrites
    its fields (last validated submission wins).
    """
    owned = get_step(step_number).fields
    merged = dict(prior_draft)
    for name, value in validated.items():
        if name in owned:
            merged[name] = value
    return merged


def mark_completed(completed_steps: list[int], step_number: int) -> list[int]:
    """Add a step to the completed set; adding it twice is a no-op."""
    if step_number in completed_steps:
        return sorted(completed_steps)
    return sorted([*completed_steps, step_number])
