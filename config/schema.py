"""drf-spectacular post-processing: one navigation tag per API area."""

from __future__ import annotations

from typing import Any

_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "options", "head"}


PATTERN_TAGS = [
    ("/api/auth/", "Authentication"),
    ("/api/admin/audit/", "Audit"),
    ("/api/admin/surveys/", "Survey Templates"),
    ("/api/admin/", "Admin"),
    ("/api/ceo/surveys/", "CEO Surveys"),
    ("/api/ceo/", "CEO"),
    ("/api/user/", "User"),
    ("/api/surveys/", "Surveys"),
    ("/api/analytics/", "Analytics"),
    ("/api/reports/", "Reports"),
    ("/api/support/", "Support"),
    ("/api/chatbot/", "Chatbot"),
    ("/api/health/", "Health"),
]

ALL_TAGS = list(dict.fromkeys(t for _, t in PATTERN_TAGS))


def assign_group_tag(path: str) -> str | None:
    """Return the first matching tag name for a given path."""
    for prefix, tag in PATTERN_TAGS:
        if path.startswith(prefix):
            return tag
    return None


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Overwrite each operation's tags with its area so Swagger UI groups by area."""
    paths = result.get("paths", {})
    for path, path_item in paths.items():
        tag = assign_group_tag(path)
        if not tag:
            continue
        for method, op_obj in path_item.items():
            if method.lower() not in _HTTP_METHODS or not isinstance(op_obj, dict):
                continue
            op_obj["tags"] = [tag]

    existing = {t.get("name") for t in result.get("tags", [])}
    tag_list = result.setdefault("tags", [])
    for tag in ALL_TAGS:
        if tag not in existing:
            tag_list.append({"name": tag})
    return result
