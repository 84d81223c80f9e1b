"""Org Directory -- the full, unfiltered project and task collections."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable

from himma.models import Project, Task, TaskStatus

logger = logging.getLogger("engine.directory")


class OrgDirectory:
    """In-memory holder of every project and task.

    Collections keep insertion order. Task records are immutable; status
    changes replace the record in place so positions never move.
    """

    def __init__(
        self,
        projects: Iterable[Project] = (),
        tasks: Iterable[Task] = (),
    ) -> None:
        self._projects: list[Project] = list(projects)
        self._tasks: list[Task] = list(tasks)

    @property
    def projects(self) -> list[Project]:
        return list(self._projects)

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_project(self, project_id: str) -> Project | None:
        return next((p for p in self._projects if p.id == project_id), None)

    def add_project(self, project: Project) -> Project:
        """Register a project.

        Raises:
            ValueError: If the id is already taken.
        """
        if self.get_project(project.id) is not None:
            raise ValueError(f"Project '{project.id}' already exists")
        self._projects.append(project)
        return project

    def get_task(self, task_id: str) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def add_task(self, task: Task) -> Task:
        """Register a task.

        Raises:
            ValueError: If the id is already taken.
        """
        if self.get_task(task.id) is not None:
            raise ValueError(f"Task '{task.id}' already exists")
        self._tasks.append(task)
        return task

    def set_status(self, task_id: str, status: TaskStatus) -> Task | None:
        """Swap in a copy of the task carrying ``status``.

        Returns:
            The new record, or None when the id is unknown.
        """
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                updated = dataclasses.replace(task, status=status)
                self._tasks[i] = updated
                return updated
        return None
