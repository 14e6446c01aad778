import datetime

import pytest

from integrations.exceptions import IntegrationError
from projects.models import Project
from projects.services import CLICKUP_WARNING, build_clickup_task_payload, create_project


class TestClickUpPayload:
    def test_uses_epoch_millis(self):
        payload = build_clickup_task_payload(
            name="Website build",
            description="Phase 1",
            assignee_id=42,
            start_date=datetime.date(2026, 1, 1),
            end_date=datetime.date(2026, 1, 2),
        )

        assert payload == {
            "name": "Website build",
            "status": "to do",
            "description": "Phase 1",
            "assignees": [42],
            "start_date": 1767225600000,
            "due_date": 1767312000000,
        }
        assert build_clickup_task_payload(name="Bare") == {"name": "Bare", "status": "to do"}


@pytest.mark.django_db
class TestCreateProject:
    def test_without_clickup(self, admin_user, company):
        result = create_project(actor=admin_user, company=company, name="Brand refresh")

        assert result.project.status == Project.Status.NOT_STARTED
        assert result.project.slug == "brand-refresh"
        assert result.clickup_task_id is None
        assert result.clickup_warning is None

    def test_links_clickup_task(self, monkeypatch, admin_user, company):
        calls = []

        def fake_create_task(list_id, payload):
            calls.append((list_id, payload))
            return {"id": "abc123", "url": "https://app.clickup.com/t/abc123"}

        monkeypatch.setattr("integrations.clickup.create_task", fake_create_task)

        result = create_project(actor=admin_user, company=company, name="Website", clickup_list_id="901")

        assert calls[0][0] == "901"
        assert result.clickup_task_id == "abc123"
        assert result.project.clickup_task_id == "abc123"

    def test_clickup_failure_does_not_block_project(self, monkeypatch, admin_user, company):
        def failing(list_id, payload):
            raise IntegrationError("ClickUp API error 500")

        monkeypatch.setattr("integrations.clickup.create_task", failing)

        result = create_project(actor=admin_user, company=company, name="Website", clickup_list_id="901")

        assert Project.objects.filter(pk=result.project.pk).exists()
        assert result.clickup_task_id is None
        assert result.clickup_warning == CLICKUP_WARNING

    def test_requires_name_and_company(self, admin_user, company):
        with pytest.raises(ValueError):
            create_project(actor=admin_user, company=company, name="  ")
        with pytest.raises(ValueError):
            create_project(actor=admin_user, company=None, name="Website")
