# core/task_helpers.py

from typing import List, Optional

from fastapi import HTTPException

from core.utils import new_id, now_ms
from models.enums import StageStatus, TaskStatus
from models.project import Project
from models.stage import Stage, Task, TaskWrite


# -----------------------------------------------------
# Dependencies between tasks
# -----------------------------------------------------
def all_tasks(project: Project) -> List[Task]:
    return [task for stage in project.stages for task in stage.tasks]


def blocking_tasks(project: Project, task: Task) -> List[Task]:
    """Prerequisites of `task` that are not completed yet."""
    if not task.dependencies:
        return []
    deps = set(task.dependencies)
    return [
        t for t in all_tasks(project)
        if t.id in deps and t.status != TaskStatus.completed
    ]


def is_task_blocked(project: Project, task: Task) -> bool:
    return bool(blocking_tasks(project, task))


def eligible_dependency_ids(project: Project, stage_id: str, exclude_task_id: Optional[str] = None) -> set:
    """Tasks of the current and earlier stages. Forward dependencies are not allowed."""
    index = project.stage_index(stage_id)
    return {
        t.id
        for stage in project.stages[: index + 1]
        for t in stage.tasks
        if t.id != exclude_task_id
    }


def depends_on(project: Project, dependency_ids: List[str], task_id: str) -> bool:
    """True when `task_id` is reachable through the dependency chains of `dependency_ids`."""
    by_id = {t.id: t for t in all_tasks(project)}
    seen = set()
    pending = list(dependency_ids)
    while pending:
        current = pending.pop()
        if current == task_id:
            return True
        if current in seen:
            continue
        seen.add(current)
        task = by_id.get(current)
        if task is not None:
            pending.extend(task.dependencies)
    return False


def validate_dependencies(project: Project, stage_id: str, dependencies: List[str], task_id: Optional[str] = None):
    allowed = eligible_dependency_ids(project, stage_id, exclude_task_id=task_id)
    invalid = [d for d in dependencies if d not in allowed]
    if invalid:
        raise HTTPException(
            status_code=422,
            detail=f"Dependencies must be tasks in this or an earlier stage: {invalid}",
        )

    if task_id and depends_on(project, dependencies, task_id):
        raise HTTPException(422, "Dependencies would create a cycle")


# -----------------------------------------------------
# Task writes (operate on a project copy)
# -----------------------------------------------------
def find_task(stage: Stage, task_id: str) -> Task:
    task = next((t for t in stage.tasks if t.id == task_id), None)
    if task is None:
        raise HTTPException(404, f"Task '{task_id}' not found in stage '{stage.id}'")
    return task


def create_task(stage: Stage, payload: TaskWrite) -> Task:
    task = Task(
        id=new_id("t"),
        title=payload.title,
        description=payload.description,
        benchmark=payload.benchmark,
        requirements=payload.requirements,
        assigned_to=payload.assigned_to,
        assignee_name=payload.assignee_name,
        status=TaskStatus.pending,
        due_date=payload.due_date or "ASAP",
        dependencies=payload.dependencies,
    )
    stage.tasks = [*stage.tasks, task]
    return task


def update_task(stage: Stage, task_id: str, payload: TaskWrite) -> Task:
    existing = find_task(stage, task_id)
    updated = existing.model_copy(update={
        "title": payload.title,
        "description": payload.description,
        "benchmark": payload.benchmark,
        "requirements": payload.requirements,
        "assigned_to": payload.assigned_to,
        "assignee_name": payload.assignee_name,
        "due_date": payload.due_date or "ASAP",
        "dependencies": payload.dependencies,
    })
    stage.tasks = [updated if t.id == task_id else t for t in stage.tasks]
    return updated


def delete_task(stage: Stage, task_id: str) -> Task:
    task = find_task(stage, task_id)
    stage.tasks = [t for t in stage.tasks if t.id != task_id]
    return task


def toggle_task(project: Project, stage: Stage, task_id: str) -> Task:
    """
    Flip a task between completed and pending, then recompute the stage:
    every task completed → stage completed, otherwise active.
    """
    task = find_task(stage, task_id)

    if is_task_blocked(project, task):
        names = [t.title for t in blocking_tasks(project, task)]
        raise HTTPException(409, f"Task is blocked by: {', '.join(names)}")

    if task.status == TaskStatus.completed:
        updated = task.model_copy(update={"status": TaskStatus.pending, "completed_at": None})
    else:
        updated = task.model_copy(update={"status": TaskStatus.completed, "completed_at": now_ms()})

    stage.tasks = [updated if t.id == task_id else t for t in stage.tasks]
    stage.status = recompute_stage_status(stage)
    return updated


def recompute_stage_status(stage: Stage) -> StageStatus:
    if all(t.status == TaskStatus.completed for t in stage.tasks):
        return StageStatus.completed
    return StageStatus.active


# -----------------------------------------------------
# Read helpers
# -----------------------------------------------------
def serialize_task(project: Project, task: Task) -> dict:
    data = task.to_wire()
    blockers = blocking_tasks(project, task)
    data["blocked"] = bool(blockers)
    data["blockingTasks"] = [t.title for t in blockers]
    return data


def stage_progress(stage: Stage) -> dict:
    total = len(stage.tasks)
    completed = sum(1 for t in stage.tasks if t.status == TaskStatus.completed)
    return {
        "totalTasks": total,
        "completedTasks": completed,
        "percent": 0 if total == 0 else round(completed / total * 100),
    }
