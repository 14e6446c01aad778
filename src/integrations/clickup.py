"""ClickUp REST client for folders, lists, members and task creation."""
from django.conf import settings

from integrations.http import request_json, require_setting

BASE_URL = "https://api.clickup.com/api/v2"


def _headers():
    return {
        "Authorization": require_setting("CLICKUP_API_TOKEN"),
        "Content-Type": "application/json",
    }


def _get(path: str):
    return request_json("GET", f"{BASE_URL}{path}", service="ClickUp", headers=_headers())


def get_folders(space_id=None) -> list[dict]:
    """Folders of the clients space as ``[{id, name}]``."""
    space_id = space_id or settings.CLICKUP_CLIENTS_SPACE_ID
    data = _get(f"/space/{space_id}/folder?archived=false")
    return [{"id": f["id"], "name": f["name"]} for f in data.get("folders", [])]


def get_lists(folder_id) -> list[dict]:
    data = _get(f"/folder/{folder_id}/list?archived=false")
    return [{"id": item["id"], "name": item["name"]} for item in data.get("lists", [])]


def get_members(space_id=None) -> list[dict]:
    """Workspace members, read through the first list of the first folder."""
    folders = get_folders(space_id)
    if not folders:
        return []
    lists = get_lists(folders[0]["id"])
    if not lists:
        return []
    data = _get(f"/list/{lists[0]['id']}/member")
    return [
        {
            "id": m["id"],
            "username": m.get("username"),
            "email": m.get("email"),
            "profilePicture": m.get("profilePicture"),
        }
        for m in data.get("members", [])
    ]


def create_task(list_id, payload: dict) -> dict:
    data = request_json(
        "POST",
        f"{BASE_URL}/list/{list_id}/task",
        service="ClickUp",
        headers=_headers(),
        json=payload,
    )
    return {"id": data["id"], "url": data.get("url", "")}
