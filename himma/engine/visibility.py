"""Visibility Resolver -- role-scoped projection of projects and tasks.

Pure functions: identical inputs always give identical, order-stable output.
Input order is preserved and nothing is cached.
"""

from __future__ import annotations

from typing import Iterable

from himma.models import Project, Role, Task, User


def resolve_visible_projects(
    user: User | None, all_projects: Iterable[Project]
) -> list[Project]:
    """Projects the user may see.

    Admins see every project. Everyone else sees only the project matching
    ``user.project_id`` (empty when they have no affiliation or it is gone).
    """
    if user is None:
        return []
    if user.role == Role.ADMIN:
        return list(all_projects)
    if not user.project_id:
        return []
    return [p for p in all_projects if p.id == user.project_id][:1]


def resolve_active_project(
    user: User | None,
    selected_id: str | None,
    visible_projects: list[Project],
) -> Project | None:
    """The project the dashboard is scoped to.

    Admins get the selected project, falling back to the first one when the
    selection is missing or stale. Non-admins always get their own project;
    selection is not honoured.
    """
    if user is None or not visible_projects:
        return None
    if user.role == Role.ADMIN and selected_id:
        for project in visible_projects:
            if project.id == selected_id:
                return project
    return visible_projects[0]


def resolve_visible_tasks(
    user: User | None, active_project: Project | None, all_tasks: Iterable[Task]
) -> list[Task]:
    """Tasks of the active project, narrowed by role."""
    if user is None or active_project is None:
        return []
    tasks = [t for t in all_tasks if t.project_id == active_project.id]
    if user.role == Role.DEPT_HEAD:
        return [t for t in tasks if t.department_id == user.department_id]
    if user.role == Role.EMPLOYEE:
        return [t for t in tasks if t.employee_id == user.id]
    return tasks
