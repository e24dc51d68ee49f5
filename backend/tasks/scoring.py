# tasks/scoring.py
"""
Productivity score for an employee's task set.

The score is a weighted sum of three signals, out of 100:

    completion  40  share of tasks COMPLETED
    deadline    35  share of completed tasks finished by their deadline
    priority    25  share of HIGH-priority tasks completed

With no HIGH-priority tasks the priority weight folds into completion (65).
With nothing completed the deadline points are forfeited, not redistributed.

The final score is computed from the unrounded contributions and then
rounded half-up; each displayed sub-score is rounded on its own, so the
sub-scores need not add up to the final score.
"""

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from .choices import TaskPriority, TaskStatus

COMPLETION_WEIGHT = 40
DEADLINE_WEIGHT = 35
PRIORITY_WEIGHT = 25

MIN_SCORE = 0
MAX_SCORE = 100


def round_half_up(value: float) -> int:
    # round() is banker's rounding: round(32.5) == 32
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class TaskSnapshot:
    status: str
    priority: str
    deadline: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: Any) -> "TaskSnapshot":
        return cls(
            status=task.status,
            priority=task.priority,
            deadline=getattr(task, "deadline", None),
            completed_at=getattr(task, "completed_at", None),
        )

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_high_priority(self) -> bool:
        return self.priority == TaskPriority.HIGH

    @property
    def is_on_time(self) -> bool:
        # Status is the source of truth: a stray completed_at on an open task is ignored
        if not self.is_completed or self.completed_at is None or self.deadline is None:
            return False
        return self.completed_at <= self.deadline


@dataclass(frozen=True)
class ScoreBreakdown:
    total_tasks: int = 0
    completed_tasks: int = 0
    on_time_tasks: int = 0
    high_priority_completed: int = 0
    high_priority_total: int = 0


@dataclass(frozen=True)
class ScoreResult:
    final_score: int
    completion_rate: int
    deadline_score: int
    priority_score: int
    breakdown: ScoreBreakdown

    def as_dict(self) -> Dict[str, Any]:
        """JSON document served by the score endpoints."""
        breakdown = asdict(self.breakdown)
        return {
            "finalScore": self.final_score,
            "completionRate": self.completion_rate,
            "deadlineScore": self.deadline_score,
            "priorityScore": self.priority_score,
            "breakdown": {
                "totalTasks": breakdown["total_tasks"],
                "completedTasks": breakdown["completed_tasks"],
                "onTimeTasks": breakdown["on_time_tasks"],
                "highPriorityCompleted": breakdown["high_priority_completed"],
                "highPriorityTotal": breakdown["high_priority_total"],
            },
        }


EMPTY_RESULT = ScoreResult(
    final_score=0,
    completion_rate=0,
    deadline_score=0,
    priority_score=0,
    breakdown=ScoreBreakdown(),
)


def compute_score(tasks: Iterable[Any]) -> ScoreResult:
    """
    Score any iterable of task-like records (Task instances, TaskSnapshots or
    anything with status, priority, deadline and completed_at). Pure; an
    empty input yields the all-zero result.
    """
    snapshots = [
        task if isinstance(task, TaskSnapshot) else TaskSnapshot.from_task(task)
        for task in tasks
    ]

    total = len(snapshots)
    if total == 0:
        return EMPTY_RESULT

    completed = sum(1 for t in snapshots if t.is_completed)
    on_time = sum(1 for t in snapshots if t.is_on_time)
    high_priority_total = sum(1 for t in snapshots if t.is_high_priority)
    high_priority_completed = sum(
        1 for t in snapshots if t.is_high_priority and t.is_completed
    )

    if high_priority_total > 0:
        completion_weight = COMPLETION_WEIGHT
        priority_weight = PRIORITY_WEIGHT
    else:
        completion_weight = COMPLETION_WEIGHT + PRIORITY_WEIGHT
        priority_weight = 0

    completion = completed / total * completion_weight
    deadline = on_time / completed * DEADLINE_WEIGHT if completed > 0 else 0.0
    priority = (
        high_priority_completed / high_priority_total * priority_weight
        if high_priority_total > 0
        else 0.0
    )

    final_score = round_half_up(completion + deadline + priority)
    final_score = max(MIN_SCORE, min(MAX_SCORE, final_score))

    return ScoreResult(
        final_score=final_score,
        completion_rate=round_half_up(completion),
        deadline_score=round_half_up(deadline),
        priority_score=round_half_up(priority),
        breakdown=ScoreBreakdown(
            total_tasks=total,
            completed_tasks=completed,
            on_time_tasks=on_time,
            high_priority_completed=high_priority_completed,
            high_priority_total=high_priority_total,
        ),
    )
