"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    workspace_id: str | None = None,
    workspace_member_id: str | None = None,
    connected_account_id: str | None = None,
    job_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict."""
    context: dict[str, Any] = {}
    if workspace_id:
        context["workspace_id"] = str(workspace_id)
    if workspace_member_id:
        context["workspace_member_id"] = str(workspace_member_id)
    if connected_account_id:
        context["connected_account_id"] = str(connected_account_id)
    if job_id:
        context["job_id"] = str(job_id)
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
