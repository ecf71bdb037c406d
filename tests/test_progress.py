import random
from datetime import timedelta

from conftest import NOW, TODAY, make_habit

from habitit.core import progress
from habitit.core.models import HistoryEntry
from habitit.core.streaks import current_streak


def assert_consistent(habit, today=TODAY):
    assert habit.streak == current_streak(habit.history, today)
    assert 0 <= habit.progress <= habit.target
    assert len(habit.history) == len({entry.date for entry in habit.history.values()})
    assert all(day == entry.date for day, entry in habit.history.items())


def test_increment_to_target_completes(service, water):
    for _ in range(3):
        habit = service.increment(water.id)

    assert habit.progress == 3
    assert habit.streak == 1
    entry = habit.entry_for(TODAY)
    assert entry.count == 3
    assert entry.completed is True
    assert entry.time_of_completion == NOW
    assert len(habit.history) == 1


def test_undo_after_increments(service, water):
    for _ in range(3):
        service.increment(water.id)
    habit = service.undo_complete(water.id)

    assert habit.progress == 0
    assert habit.entry_for(TODAY) is None
    assert habit.streak == 0


def test_increment_clamps_at_target(service, water):
    for _ in range(5):
        habit = service.increment(water.id)

    assert habit.progress == 3
    assert habit.streak == 1
    assert len(habit.history) == 1


def test_decrement_floors_at_zero(service, water):
    habit = service.decrement(water.id)
    assert habit.progress == 0
    assert habit.history == {}


def test_decrement_keeps_closed_day(service, water):
    for _ in range(3):
        service.increment(water.id)
    habit = service.decrement(water.id)

    assert habit.progress == 2
    assert habit.is_completed_on(TODAY)
    assert habit.streak == 1

    # Reaching the target again must not count the day twice
    habit = service.increment(water.id)
    assert habit.progress == 3
    assert habit.streak == 1


def test_increment_ignored_for_completion_habit(service, run):
    habit = service.increment(run.id)
    assert habit.progress == 0
    assert habit.history == {}


def test_complete_completion_habit(service, run):
    habit = service.complete(run.id)

    assert habit.progress == habit.target == 1
    assert habit.streak == 1
    assert habit.entry_for(TODAY).count == 1
    assert service.is_completed_today(run.id)


def test_complete_count_habit_with_partial_progress(service, water):
    service.increment(water.id)
    habit = service.complete(water.id)

    assert habit.progress == 3
    assert habit.entry_for(TODAY).count == 3


def test_repeat_complete_does_not_double_count(service, run):
    service.complete(run.id)
    habit = service.complete(run.id)

    assert habit.streak == 1
    assert len(habit.history) == 1


def test_undo_restores_previous_streak(service, run, clock):
    service.complete(run.id)
    clock.advance(days=1)
    before = service.complete(run.id)
    assert before.streak == 2

    clock.advance(days=1)
    pre_complete = service.get(run.id).streak
    service.complete(run.id)
    habit = service.undo_complete(run.id)

    assert habit.streak == pre_complete
    assert habit.progress == 0
    assert habit.entry_for(clock.today()) is None


def test_undo_discards_partial_progress(service, water):
    service.increment(water.id)
    service.increment(water.id)
    service.complete(water.id)
    habit = service.undo_complete(water.id)

    assert habit.progress == 0
    assert habit.entry_for(TODAY) is None


def test_undo_without_completion_keeps_streak(service, run, clock):
    service.complete(run.id)
    clock.advance(days=1)
    habit = service.undo_complete(run.id)

    assert habit.streak == 1
    assert habit.history.keys() == {TODAY}


def test_new_day_resets_progress(service, water, clock):
    service.increment(water.id)
    service.increment(water.id)
    clock.advance(days=1)

    habit = service.increment(water.id)
    assert habit.progress == 1
    assert habit.cycle_date == clock.today()


def test_streak_continues_across_days(service, run, clock):
    for _ in range(4):
        habit = service.complete(run.id)
        assert_consistent(habit, clock.today())
        clock.advance(days=1)

    assert habit.streak == 4


def test_open_day_keeps_yesterdays_run(service, water, clock):
    service.complete(water.id)
    clock.advance(days=1)
    service.complete(water.id)
    clock.advance(days=1)

    habit = service.increment(water.id)
    yesterday = clock.today() - timedelta(days=1)
    assert habit.streak == current_streak(habit.history, yesterday) == 2
    assert current_streak(habit.history, clock.today()) == 0

    habit = service.increment(water.id)
    habit = service.increment(water.id)
    assert habit.streak == 3
    assert_consistent(habit, clock.today())


def test_missed_day_restarts_streak(service, run, clock):
    service.complete(run.id)
    clock.advance(days=1)
    service.complete(run.id)
    clock.advance(days=2)

    habit = service.complete(run.id)
    assert habit.streak == 1
    assert_consistent(habit, clock.today())


def test_unknown_id_is_noop(service, repository, water):
    saves = repository.saves

    assert service.increment("missing") is None
    assert service.decrement("missing") is None
    assert service.complete("missing") is None
    assert service.undo_complete("missing") is None
    assert service.is_completed_today("missing") is False
    assert repository.saves == saves


def test_random_operation_sequences_keep_invariants():
    operations = [progress.increment, progress.decrement, progress.complete, progress.undo_complete]
    rng = random.Random(1234)

    for count_type, unit in (("count", "pages"), ("completion", "")):
        for _ in range(200):
            habit = make_habit(target=rng.randint(1, 4), count_type=count_type, count_unit=unit)
            for _ in range(rng.randint(1, 12)):
                rng.choice(operations)(habit, NOW)
                assert_consistent(habit)


def test_completion_overwrites_existing_entry_for_today():
    habit = make_habit(target=4, count_type="count", count_unit="laps")
    habit.put_entry(HistoryEntry(date=TODAY, count=2, completed=False))

    progress.complete(habit, NOW)
    assert len(habit.history) == 1
    assert habit.entry_for(TODAY).completed
    assert habit.entry_for(TODAY).count == 4


def test_yesterday_partial_entry_does_not_count():
    habit = make_habit()
    habit.put_entry(HistoryEntry(date=TODAY - timedelta(days=1), count=0, completed=False))

    progress.complete(habit, NOW)
    assert habit.streak == 1
    assert_consistent(habit)
