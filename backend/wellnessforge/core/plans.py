"""Plan Progress - Pure functions over wellness plan checklists.

Plans are immutable; toggling a task returns a new plan.
"""

from .models import WellnessPlan, WellnessTask


def completed_count(plan: WellnessPlan) -> int:
    return sum(1 for task in plan.tasks if task.is_completed)


def progress_fraction(plan: WellnessPlan) -> float:
    """Share of completed tasks in [0, 1].

    Args:
        plan: The plan to measure

    Returns:
        Completed / total, or 0.0 for a plan without tasks
    """
    if not plan.tasks:
        return 0.0
    return completed_count(plan) / len(plan.tasks)


def toggle_task(plan: WellnessPlan, task_id: str) -> WellnessPlan:
    """Flip one task's completion.

    Args:
        plan: The plan holding the task
        task_id: ID of the task to flip

    Returns:
        A new plan with that task toggled

    Raises:
        KeyError: If the plan has no task with that ID
    """
    if not any(task.id == task_id for task in plan.tasks):
        raise KeyError(task_id)

    tasks: list[WellnessTask] = [
        task.model_copy(update={"is_completed": not task.is_completed}) if task.id == task_id else task
        for task in plan.tasks
    ]
    return plan.model_copy(update={"tasks": tuple(tasks)})
