"""
Milestone detector: celebrate when the voting-done percentage crosses a decile.

The detector is a pure state machine.  ``advance`` is called once per stats
recompute with the new percentage and returns the next state plus the
effects the owner must run (currently only ``Celebrate``, which the
controller turns into a banner and a 5 second auto-clear timer).

States are Idle (``is_celebrating`` False) and Celebrating.

Rules:
  * The first observation only seeds: ``previous_percentage`` becomes the
    observed value and every decile already reached counts as fired, so
    loading a dashboard at 47% does not celebrate 10..40.
  * A rise from ``previous`` to ``current`` crosses every decile m with
    previous < m <= current.  Crossed deciles other than the last fired one
    are queued; while Idle the lowest queued decile fires.  At most one
    celebration per recompute, so a big jump drains over later recomputes.
  * Nothing fires while Celebrating; crossings made meanwhile stay queued.
  * A drop below a queued decile discards it.
  * ``clear`` (auto-clear timer) and ``dismiss`` (user) return to Idle.
    ``clear`` carries the celebration id it was scheduled for and is a no-op
    once a newer celebration has started.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

MILESTONES = tuple(range(10, 101, 10))


@dataclass(frozen=True)
class MilestoneState:
    previous_percentage: int = 0
    last_fired_milestone: int | None = None
    is_celebrating: bool = False
    celebrating_value: int | None = None
    seeded: bool = False
    pending: tuple[int, ...] = ()
    celebration_id: int = 0

    def to_dict(self) -> dict:
        return {
            "previous_percentage": self.previous_percentage,
            "last_fired_milestone": self.last_fired_milestone,
            "is_celebrating": self.is_celebrating,
            "celebrating_value": self.celebrating_value,
            "pending": list(self.pending),
        }


@dataclass(frozen=True)
class Celebrate:
    """Effect: show the banner for *milestone* and schedule its auto-clear."""

    milestone: int
    celebration_id: int


def highest_milestone_reached(percentage: int) -> int | None:
    """Highest decile <= *percentage*, or None below 10."""
    reached = [m for m in MILESTONES if m <= percentage]
    return reached[-1] if reached else None


def crossed_milestones(previous: int, current: int) -> tuple[int, ...]:
    """Deciles m with previous < m <= current, ascending."""
    return tuple(m for m in MILESTONES if previous < m <= current)


def _clamp(percentage: int) -> int:
    return max(0, min(100, int(percentage)))


def advance(state: MilestoneState, percentage: int) -> tuple[MilestoneState, tuple[Celebrate, ...]]:
    """Observe *percentage* and return ``(new_state, effects)``."""
    current = _clamp(percentage)

    if not state.seeded:
        return replace(
            state,
            seeded=True,
            previous_percentage=current,
            last_fired_milestone=highest_milestone_reached(current),
        ), ()

    pending = [m for m in state.pending if m <= current]
    if current > state.previous_percentage:
        for m in crossed_milestones(state.previous_percentage, current):
            if m != state.last_fired_milestone and m not in pending:
                pending.append(m)
    pending.sort()

    state = replace(state, previous_percentage=current, pending=tuple(pending))
    if state.is_celebrating or not pending:
        return state, ()

    milestone = pending[0]
    celebration_id = state.celebration_id + 1
    state = replace(
        state,
        pending=tuple(pending[1:]),
        last_fired_milestone=milestone,
        is_celebrating=True,
        celebrating_value=milestone,
        celebration_id=celebration_id,
    )
    return state, (Celebrate(milestone, celebration_id),)


def dismiss(state: MilestoneState) -> MilestoneState:
    """User dismissal: leave Celebrating immediately."""
    if not state.is_celebrating:
        return state
    return replace(state, is_celebrating=False, celebrating_value=None)


def clear(state: MilestoneState, celebration_id: int) -> MilestoneState:
    """Auto-clear for *celebration_id*; ignored if a newer celebration is showing."""
    if state.celebration_id != celebration_id:
        return state
    return dismiss(state)
