"""
Tests for dashboard/milestones.py: decile celebration state machine.

Drives ``advance`` with percentage sequences and checks which deciles fire,
in which order, and that the celebrating state blocks and clears correctly.
"""
from dashboard.milestones import (
    MILESTONES,
    Celebrate,
    MilestoneState,
    advance,
    clear,
    crossed_milestones,
    dismiss,
    highest_milestone_reached,
)


def _run(percentages, state=None, auto_clear=True):
    """Feed *percentages* in order; return (state, fired milestones)."""
    state = state or MilestoneState()
    fired = []
    for pct in percentages:
        state, effects = advance(state, pct)
        for effect in effects:
            fired.append(effect.milestone)
            if auto_clear:
                state = clear(state, effect.celebration_id)
    return state, fired


# ── Helpers ──────────────────────────────────────────────────────────────────

class TestHelpers:
    def test_milestones_are_deciles(self):
        assert MILESTONES == (10, 20, 30, 40, 50, 60, 70, 80, 90, 100)

    def test_highest_reached(self):
        assert highest_milestone_reached(0) is None
        assert highest_milestone_reached(9) is None
        assert highest_milestone_reached(10) == 10
        assert highest_milestone_reached(47) == 40
        assert highest_milestone_reached(100) == 100

    def test_crossed_is_half_open(self):
        assert crossed_milestones(10, 30) == (20, 30)
        assert crossed_milestones(9, 10) == (10,)
        assert crossed_milestones(30, 30) == ()
        assert crossed_milestones(50, 20) == ()


# ── Seeding ──────────────────────────────────────────────────────────────────

class TestSeeding:
    def test_first_observation_never_fires(self):
        state, effects = advance(MilestoneState(), 47)
        assert effects == ()
        assert state.seeded is True
        assert state.previous_percentage == 47
        assert state.last_fired_milestone == 40
        assert state.is_celebrating is False

    def test_seed_below_ten(self):
        state, _ = advance(MilestoneState(), 5)
        assert state.last_fired_milestone is None

    def test_next_decile_after_seed_fires(self):
        state, _ = advance(MilestoneState(), 47)
        state, effects = advance(state, 52)
        assert effects == (Celebrate(50, 1),)

    def test_small_rise_after_seed_silent(self):
        state, _ = advance(MilestoneState(), 47)
        _, effects = advance(state, 49)
        assert effects == ()


# ── Firing ───────────────────────────────────────────────────────────────────

class TestFiring:
    def test_reference_sequence_fires_every_decile_once(self):
        # 0 seeds, 15 fires 10, 15 again is silent, 25 fires 20, 100 starts
        # draining 30..100 one per recompute
        state, fired = _run([0, 15, 15, 25, 100])
        assert fired == [10, 20, 30]
        state, more = _run([100] * 10, state)
        assert fired + more == list(MILESTONES)
        assert state.pending == ()

    def test_at_most_one_per_recompute(self):
        state, _ = advance(MilestoneState(), 0)
        state, effects = advance(state, 100)
        assert len(effects) == 1
        assert effects[0].milestone == 10
        assert state.pending == (20, 30, 40, 50, 60, 70, 80, 90, 100)

    def test_exact_boundary_fires(self):
        _, fired = _run([9, 10])
        assert fired == [10]

    def test_celebrating_state_set(self):
        state, _ = advance(MilestoneState(), 0)
        state, _ = advance(state, 12)
        assert state.is_celebrating is True
        assert state.celebrating_value == 10
        assert state.last_fired_milestone == 10

    def test_previous_updates_without_crossing(self):
        state, _ = _run([0, 3, 7])
        assert state.previous_percentage == 7

    def test_clamps_out_of_range(self):
        state, fired = _run([0, 150])
        assert state.previous_percentage == 100
        assert fired == [10]


# ── Celebrating / re-arm ─────────────────────────────────────────────────────

class TestCelebrating:
    def test_no_fire_while_celebrating(self):
        state, _ = advance(MilestoneState(), 0)
        state, first = advance(state, 15)
        state, effects = advance(state, 25)
        assert first[0].milestone == 10
        assert effects == ()
        assert state.pending == (20,)

    def test_queued_crossing_fires_after_clear(self):
        state, _ = advance(MilestoneState(), 0)
        state, first = advance(state, 15)
        state, _ = advance(state, 25)
        state = clear(state, first[0].celebration_id)
        state, effects = advance(state, 25)
        assert [e.milestone for e in effects] == [20]

    def test_stale_clear_is_ignored(self):
        state, _ = advance(MilestoneState(), 0)
        state, first = advance(state, 15)
        state = dismiss(state)
        state, second = advance(state, 25)
        cleared = clear(state, first[0].celebration_id)
        assert cleared.is_celebrating is True
        assert cleared.celebrating_value == second[0].milestone

    def test_dismiss(self):
        state, _ = advance(MilestoneState(), 0)
        state, _ = advance(state, 15)
        state = dismiss(state)
        assert state.is_celebrating is False
        assert state.celebrating_value is None
        assert state.last_fired_milestone == 10

    def test_dismiss_when_idle_is_noop(self):
        state = MilestoneState()
        assert dismiss(state) is state

    def test_celebration_ids_increase(self):
        state, _ = advance(MilestoneState(), 0)
        ids = []
        for pct in (15, 25, 35):
            state, effects = advance(state, pct)
            ids.append(effects[0].celebration_id)
            state = clear(state, effects[0].celebration_id)
        assert ids == [1, 2, 3]


# ── Drops ────────────────────────────────────────────────────────────────────

class TestDrops:
    def test_last_fired_not_refired_after_dip(self):
        _, fired = _run([0, 15, 5, 15])
        assert fired == [10]

    def test_rise_after_dip_fires_new_decile(self):
        _, fired = _run([0, 15, 5, 25])
        assert fired == [10, 20]

    def test_drop_discards_pending(self):
        state, _ = advance(MilestoneState(), 0)
        state, effects = advance(state, 35)
        assert state.pending == (20, 30)
        state, _ = advance(state, 15)
        assert state.pending == ()
        state = clear(state, effects[0].celebration_id)
        state, effects = advance(state, 15)
        assert effects == ()

    def test_to_dict(self):
        state, _ = advance(MilestoneState(), 0)
        state, _ = advance(state, 35)
        assert state.to_dict() == {
            "previous_percentage": 35,
            "last_fired_milestone": 10,
            "is_celebrating": True,
            "celebrating_value": 10,
            "pending": [20, 30],
        }
