"""Tests for structured logging helpers."""

from connected_accounts.core.structured_logging import build_log_context
from connected_accounts.jobs.utils import mask_email


def test_build_log_context_includes_only_provided_fields():
    context = build_log_context(
        workspace_id="ws-1",
        workspace_member_id="member-1",
        connected_account_id="acc-1",
        request_id="req-1",
        route="/auth/google-apis/get-access-token",
        method="GET",
    )

    assert context == {
        "workspace_id": "ws-1",
        "workspace_member_id": "member-1",
        "connected_account_id": "acc-1",
        "request_id": "req-1",
        "route": "/auth/google-apis/get-access-token",
        "method": "GET",
    }


def test_build_log_context_ignores_empty_fields():
    context = build_log_context(
        workspace_id="",
        job_id=None,
        request_id="req-1",
    )

    assert context == {"request_id": "req-1"}


def test_mask_email_hides_local_part():
    assert mask_email("jane.doe@example.com") == "jan...@example.com"
    assert mask_email(None) == ""
