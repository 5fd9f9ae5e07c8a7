"""Shared helpers for worker job handlers."""

from __future__ import annotations

from uuid import UUID


def mask_email(email: str | None) -> str:
    if not email:
        return ""
    local, _, domain = email.partition("@")
    prefix = local[:3] if local else ""
    return f"{prefix}...@{domain}" if domain else f"{prefix}..."


def require_uuid(payload: dict, key: str, job_type: str) -> UUID:
    """Read a UUID field from a job payload or raise ValueError."""
    raw = payload.get(key)
    if not raw:
        raise ValueError(f"Missing {key} in {job_type} payload")
    try:
        return UUID(str(raw))
    except ValueError as exc:
        raise ValueError(f"Invalid {key} in {job_type} payload") from exc
