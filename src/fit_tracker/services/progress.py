"""Challenge progress aggregation.

Two views are computed from the same inputs (a challenge's targets, its
inclusive date range and a sparse ``date -> ExerciseRecord`` mapping):

* owner view: only recorded days up to today, absolute values. Body metrics
  are judged on the latest recorded day; exercise duration is summed over all
  recorded days and compared once against the target.
* shared view: every calendar day of the challenge, values expressed as
  differences from target, rates counted across all recorded days. Routine
  completion is folded in when routine data is supplied.

Everything here is pure and synchronous; callers fetch the data first.
"""

from collections.abc import Iterable, Iterator, Mapping
from datetime import date, timedelta

from ..models.challenge import Challenge
from ..models.exercise_record import ExerciseRecord
from ..models.progress import (
    EXERCISE_DURATION,
    METRICS,
    SNAPSHOT_METRICS,
    ChallengeProgress,
    DailyProgress,
    Metric,
    MetricSummary,
    OverallProgress,
    RoutineSummary,
    SharedDailyProgress,
)
from ..models.routine import RoutineType


def check_success(
    actual: float | None, target: float | None, higher_is_better: bool
) -> bool:
    """Judge one value against its target.

    Missing actual or target is never a success.
    """
    if actual is None or target is None:
        return False
    if higher_is_better:
        return actual >= target
    return actual <= target


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def index_by_date(records: Iterable[ExerciseRecord]) -> dict[date, ExerciseRecord]:
    """Map records by their record_date."""
    return {record.record_date: record for record in records}


def target_for(challenge: Challenge, metric: Metric) -> float | int | None:
    if metric.target_field is None:
        return None
    return getattr(challenge, metric.target_field)


def _percent(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def _ratio(actual: float, target: float) -> float:
    """actual / target as a percentage; any nonzero target divides as-is."""
    if target == 0:
        return 0.0
    return actual / target * 100


def _success_flags(challenge: Challenge, record: ExerciseRecord | None) -> dict[str, bool]:
    return {
        metric.name: check_success(
            getattr(record, metric.field) if record is not None else None,
            target_for(challenge, metric),
            metric.higher_is_better,
        )
        for metric in METRICS
    }


def build_owner_progress(
    challenge: Challenge,
    records: Mapping[date, ExerciseRecord],
    today: date,
) -> ChallengeProgress:
    """Owner trend view of a challenge.

    Args:
        challenge: The challenge whose targets and range apply
        records: Owner's records keyed by date (may include dates outside the range)
        today: Reference date; later records are ignored

    Returns:
        Recorded days in date order, and the overall summary where body
        metrics reflect only the latest day and duration is cumulative.
    """
    daily: list[DailyProgress] = []
    for day in sorted(records):
        if day > today or day < challenge.start_date or day > challenge.end_date:
            continue
        record = records[day]
        if not record.has_tracked_values():
            continue
        daily.append(
            DailyProgress(
                date=day,
                values={metric.field: getattr(record, metric.field) for metric in METRICS},
                success=_success_flags(challenge, record),
            )
        )

    overall = OverallProgress(total_days=len(daily))

    if daily:
        last = daily[-1]
        for metric in SNAPSHOT_METRICS:
            actual = last.values[metric.field]
            target = target_for(challenge, metric)
            if actual is None or target is None:
                continue
            overall.metrics[metric.name] = MetricSummary(
                success_count=1 if last.success[metric.name] else 0,
                recorded_days=1,
                success_rate=_ratio(actual, target),
            )

    total_duration = sum(
        entry.values[EXERCISE_DURATION.field] or 0 for entry in daily
    )
    duration = MetricSummary(recorded_days=1 if total_duration > 0 else 0)
    target_duration = challenge.target_exercise_duration
    if target_duration is not None and target_duration > 0:
        duration.success_rate = _percent(total_duration, target_duration)
        duration.success_count = 1 if total_duration >= target_duration else 0
    overall.metrics[EXERCISE_DURATION.name] = duration

    return ChallengeProgress(daily=daily, overall=overall)


def _routine_counts(
    routines: Mapping[RoutineType, list[str]],
    checks: Mapping[RoutineType, list[str]],
) -> dict[RoutineType, tuple[int, int]]:
    return {
        routine_type: (len(checks.get(routine_type, [])), len(routines.get(routine_type, [])))
        for routine_type in RoutineType
    }


def build_shared_progress(
    challenge: Challenge,
    records: Mapping[date, ExerciseRecord],
    routines: Mapping[RoutineType, list[str]] | None = None,
    routine_checks: Mapping[date, Mapping[RoutineType, list[str]]] | None = None,
) -> ChallengeProgress:
    """Shared (cross-user) view of a challenge.

    Produces one entry per calendar day in the challenge range, recorded or
    not. When ``routines`` is given (routine items per type), each day also
    carries checked/total counts drawn from ``routine_checks`` and the
    summary includes per-type full-completion rates.
    """
    include_routines = routines is not None
    routine_checks = routine_checks or {}

    daily: list[SharedDailyProgress] = []
    for day in date_range(challenge.start_date, challenge.end_date):
        record = records.get(day)
        diffs: dict[str, float | int | None] = {}
        for metric in METRICS:
            actual = getattr(record, metric.field) if record is not None else None
            target = target_for(challenge, metric)
            diffs[metric.name] = (
                actual - target if actual is not None and target is not None else None
            )

        entry = SharedDailyProgress(
            date=day,
            diffs=diffs,
            success=_success_flags(challenge, record),
        )
        if include_routines:
            entry.routines = _routine_counts(routines, routine_checks.get(day, {}))
        daily.append(entry)

    overall = OverallProgress(total_days=len(daily))
    for metric in METRICS:
        summary = MetricSummary()
        for entry in daily:
            if entry.diffs[metric.name] is None:
                continue
            summary.recorded_days += 1
            if entry.success[metric.name]:
                summary.success_count += 1
        summary.success_rate = _percent(summary.success_count, summary.recorded_days)
        if metric is EXERCISE_DURATION:
            target = target_for(challenge, metric)
            if target is None or target <= 0:
                summary.success_rate = 0.0
        overall.metrics[metric.name] = summary

    if include_routines:
        overall.routines = {}
        for routine_type in RoutineType:
            summary = RoutineSummary()
            for entry in daily:
                checked, total = entry.routines[routine_type]
                if total <= 0:
                    continue
                summary.recorded_days += 1
                if checked == total:
                    summary.success_days += 1
            summary.success_rate = _percent(summary.success_days, summary.recorded_days)
            overall.routines[routine_type] = summary

    return ChallengeProgress(daily=daily, overall=overall)
