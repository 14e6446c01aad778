"""Project creation with an optional ClickUp task."""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone as dt_timezone

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction

from core.services import create_audit_log
from core.text import unique_slug
from integrations import clickup
from integrations.exceptions import IntegrationError
from projects.models import Project

logger = logging.getLogger("portal")

CLICKUP_WARNING = "Project created, but ClickUp task creation failed. You can link it manually later."


@dataclass
class ProjectCreation:
    project: Project
    clickup_task_id: str | None
    clickup_warning: str | None


def _epoch_ms(value: date) -> int:
    return int(datetime.combine(value, time.min, tzinfo=dt_timezone.utc).timestamp() * 1000)


def build_clickup_task_payload(*, name, description="", assignee_id=None, start_date=None, end_date=None):
    payload = {"name": name, "status": "to do"}
    if description:
        payload["description"] = description
    if assignee_id:
        payload["assignees"] = [assignee_id]
    if start_date:
        payload["start_date"] = _epoch_ms(start_date)
    if end_date:
        payload["due_date"] = _epoch_ms(end_date)
    return payload


def create_project(
    *,
    actor,
    company,
    name: str,
    description: str = "",
    status: str = "",
    start_date: date | None = None,
    end_date: date | None = None,
    clickup_list_id: str = "",
    clickup_assignee_id=None,
) -> ProjectCreation:
    """Create a project; a ClickUp task is created first when a list is given.

    ClickUp failures never block project creation: the result carries a
    warning instead.
    """
    name = (name or "").strip()
    if not name or company is None:
        raise ValueError("name and company_id are required")

    clickup_task_id = None
    clickup_warning = None
    if clickup_list_id:
        try:
            task = clickup.create_task(
                clickup_list_id,
                build_clickup_task_payload(
                    name=name,
                    description=description,
                    assignee_id=clickup_assignee_id,
                    start_date=start_date,
                    end_date=end_date,
                ),
            )
            clickup_task_id = task["id"]
        except (IntegrationError, ImproperlyConfigured, KeyError):
            logger.exception("ClickUp task creation failed for project %r (non-blocking)", name)
            clickup_warning = CLICKUP_WARNING

    with transaction.atomic():
        project = Project.objects.create(
            company=company,
            name=name,
            slug=unique_slug(Project, name),
            description=description or "",
            status=status or Project.Status.NOT_STARTED,
            start_date=start_date,
            end_date=end_date,
            clickup_task_id=clickup_task_id or "",
        )
        create_audit_log(
            actor=actor,
            company=company,
            action="PROJECT_CREATED",
            entity_type="Project",
            entity_id=str(project.pk),
            after={"name": project.name, "status": project.status, "clickup_task_id": clickup_task_id},
        )
    logger.info("Project %s created for %s by %s", project.slug, company.slug, actor)
    return ProjectCreation(project=project, clickup_task_id=clickup_task_id, clickup_warning=clickup_warning)
