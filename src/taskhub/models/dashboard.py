"""Dashboard rollup model."""

from pydantic import BaseModel, Field

from taskhub.models.activity import Activity


class DashboardSummary(BaseModel):
    """Counts and rates over all tasks and notes plus the latest activity."""

    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    total_notes: int = 0
    completion_rate: float = 0.0
    notes_per_task: int = 0
    recent_activities: list[Activity] = Field(default_factory=list)

    @classmethod
    def from_counts(
        cls,
        total_tasks: int,
        completed_tasks: int,
        total_notes: int,
        recent_activities: list[Activity],
    ) -> "DashboardSummary":
        """Build a summary; rates are 0 when there are no tasks.

        ``notes_per_task`` truncates (integer division), it is not a true average.
        """
        return cls(
            total_tasks=total_tasks,
            completed_tasks=completed_tasks,
            pending_tasks=total_tasks - completed_tasks,
            total_notes=total_notes,
            completion_rate=(completed_tasks * 100.0) / total_tasks if total_tasks else 0.0,
            notes_per_task=total_notes // total_tasks if total_tasks else 0,
            recent_activities=recent_activities,
        )
