"""Challenge progress result models."""

from dataclasses import dataclass, field
from datetime import date

from pydantic.alias_generators import to_camel

from .routine import RoutineType


@dataclass(frozen=True)
class Metric:
    """A tracked metric and how it is judged against its target.

    ``name`` prefixes summary/diff/success keys, ``field`` is the attribute on
    ExerciseRecord, ``target_field`` the attribute on Challenge (None when the
    metric has no target and so can never succeed).
    """

    name: str
    field: str
    target_field: str | None
    higher_is_better: bool


WEIGHT = Metric("weight", "weight", "target_weight", higher_is_better=False)
BODY_FAT = Metric(
    "body_fat", "body_fat_percentage", "target_body_fat_percentage", higher_is_better=False
)
MUSCLE_MASS = Metric("muscle_mass", "muscle_mass", "target_muscle_mass", higher_is_better=True)
MUSCLE_PERCENTAGE = Metric("muscle_percentage", "muscle_percentage", None, higher_is_better=True)
EXERCISE_DURATION = Metric(
    "exercise_duration", "exercise_duration", "target_exercise_duration", higher_is_better=True
)

METRICS = (WEIGHT, BODY_FAT, MUSCLE_MASS, MUSCLE_PERCENTAGE, EXERCISE_DURATION)

# Owner view judges these on the latest recorded day only
SNAPSHOT_METRICS = (WEIGHT, BODY_FAT, MUSCLE_MASS)


@dataclass
class MetricSummary:
    """Aggregated outcome for one metric."""

    success_count: int = 0
    recorded_days: int = 0
    success_rate: float = 0.0


@dataclass
class RoutineSummary:
    """Full-completion statistics for one routine type."""

    success_days: int = 0
    recorded_days: int = 0
    success_rate: float = 0.0


@dataclass
class DailyProgress:
    """Owner view of one recorded day: absolute values plus success flags."""

    date: date
    values: dict[str, float | int | None]  # keyed by Metric.field
    success: dict[str, bool]  # keyed by Metric.name

    def to_dict(self) -> dict:
        data = {"date": self.date.isoformat()}
        for metric in METRICS:
            data[to_camel(metric.field)] = self.values.get(metric.field)
        for metric in METRICS:
            data[to_camel(f"{metric.name}_success")] = self.success.get(metric.name, False)
        return data


@dataclass
class SharedDailyProgress:
    """Shared view of one calendar day: differences from target, never raw values.

    ``routines`` maps each routine type to ``(checked, total)`` and is None
    when routine data was not part of the aggregation.
    """

    date: date
    diffs: dict[str, float | int | None]  # keyed by Metric.name
    success: dict[str, bool]
    routines: dict[RoutineType, tuple[int, int]] | None = None

    def to_dict(self) -> dict:
        data = {"date": self.date.isoformat()}
        for metric in METRICS:
            data[to_camel(f"{metric.name}_diff")] = self.diffs.get(metric.name)
        for metric in METRICS:
            data[to_camel(f"{metric.name}_success")] = self.success.get(metric.name, False)
        if self.routines is not None:
            for routine_type, (checked, total) in self.routines.items():
                prefix = routine_type.value.lower()
                data[to_camel(f"{prefix}_routine_total")] = total
                data[to_camel(f"{prefix}_routine_checked")] = checked
        return data


@dataclass
class OverallProgress:
    """Summary across the whole challenge."""

    total_days: int = 0
    metrics: dict[str, MetricSummary] = field(
        default_factory=lambda: {m.name: MetricSummary() for m in METRICS}
    )
    routines: dict[RoutineType, RoutineSummary] | None = None

    def metric(self, name: str) -> MetricSummary:
        return self.metrics[name]

    def to_dict(self) -> dict:
        data = {"totalDays": self.total_days}
        for metric in METRICS:
            summary = self.metrics.get(metric.name, MetricSummary())
            data[to_camel(f"{metric.name}_success_count")] = summary.success_count
            data[to_camel(f"{metric.name}_recorded_days")] = summary.recorded_days
            data[to_camel(f"{metric.name}_success_rate")] = summary.success_rate
        if self.routines is not None:
            for routine_type, summary in self.routines.items():
                prefix = routine_type.value.lower()
                data[to_camel(f"{prefix}_routine_success_days")] = summary.success_days
                data[to_camel(f"{prefix}_routine_recorded_days")] = summary.recorded_days
                data[to_camel(f"{prefix}_routine_success_rate")] = summary.success_rate
        return data


@dataclass
class ChallengeProgress:
    """Daily entries (ordered by date) plus the overall summary."""

    daily: list[DailyProgress] | list[SharedDailyProgress]
    overall: OverallProgress
