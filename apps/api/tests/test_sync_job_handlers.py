import uuid

import pytest

from connected_accounts.services.data_source_service import WorkspaceDataSource


def _job(workspace_id, payload):
    return type(
        "Job",
        (),
        {
            "id": uuid.uuid4(),
            "workspace_id": workspace_id,
            "payload": payload,
        },
    )()


@pytest.mark.asyncio
async def test_message_list_fetch_handler_invokes_sync(db, test_workspace, monkeypatch):
    from connected_accounts.jobs.handlers import messaging as messaging_handler

    called: dict[str, object] = {}
    account_id = uuid.uuid4()

    async def fake_sync_message_list(connection, workspace_id, connected_account_id):
        called["connection"] = connection
        called["workspace_id"] = workspace_id
        called["connected_account_id"] = connected_account_id
        return 3

    monkeypatch.setattr(
        "connected_accounts.services.gmail_sync_service.sync_message_list",
        fake_sync_message_list,
    )

    job = _job(
        test_workspace.workspace_id,
        {
            "workspace_id": str(test_workspace.workspace_id),
            "connected_account_id": str(account_id),
        },
    )
    await messaging_handler.process_messaging_message_list_fetch(db, job)

    assert isinstance(called["connection"], WorkspaceDataSource)
    assert called["workspace_id"] == test_workspace.workspace_id
    assert called["connected_account_id"] == account_id


@pytest.mark.asyncio
async def test_google_calendar_sync_handler_invokes_sync(db, test_workspace, monkeypatch):
    from connected_accounts.jobs.handlers import calendar as calendar_handler

    called: dict[str, object] = {}
    account_id = uuid.uuid4()

    async def fake_sync_calendar_channel(connection, workspace_id, connected_account_id):
        called["workspace_id"] = workspace_id
        called["connected_account_id"] = connected_account_id
        return 0

    monkeypatch.setattr(
        "connected_accounts.services.google_calendar_sync_service.sync_calendar_channel",
        fake_sync_calendar_channel,
    )

    job = _job(
        test_workspace.workspace_id,
        {
            "workspace_id": str(test_workspace.workspace_id),
            "connected_account_id": str(account_id),
        },
    )
    await calendar_handler.process_google_calendar_sync(db, job)

    assert called["workspace_id"] == test_workspace.workspace_id
    assert called["connected_account_id"] == account_id


@pytest.mark.asyncio
async def test_handler_rejects_payload_without_account(db, test_workspace):
    from connected_accounts.jobs.handlers import calendar as calendar_handler

    job = _job(test_workspace.workspace_id, {"workspace_id": str(test_workspace.workspace_id)})

    with pytest.raises(ValueError, match="connected_account_id"):
        await calendar_handler.process_google_calendar_sync(db, job)


@pytest.mark.asyncio
async def test_handler_rejects_malformed_uuid(db, test_workspace):
    from connected_accounts.jobs.handlers import messaging as messaging_handler

    job = _job(
        test_workspace.workspace_id,
        {"workspace_id": "not-a-uuid", "connected_account_id": str(uuid.uuid4())},
    )

    with pytest.raises(ValueError, match="Invalid workspace_id"):
        await messaging_handler.process_messaging_message_list_fetch(db, job)
