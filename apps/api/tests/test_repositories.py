import uuid
from datetime import datetime, timezone

import pytest

from connected_accounts.db.enums import (
    ConnectedAccountProvider,
    MessageChannelSyncStatus,
    MessageChannelType,
    MessageChannelVisibility,
)
from connected_accounts.db.models import CalendarChannel, ConnectedAccount, MessageChannel, Workspace
from connected_accounts.repositories import (
    REPOSITORIES,
    calendar_channel_repository,
    connected_account_repository,
    get_repository,
    message_channel_repository,
)
from connected_accounts.repositories.connected_account_repository import (
    ConnectedAccountRepository,
)


def _create_account(session, ctx, handle="jane@example.com") -> ConnectedAccount:
    return connected_account_repository().create(
        session,
        id=uuid.uuid4(),
        workspace_id=ctx.workspace_id,
        handle=handle,
        provider=ConnectedAccountProvider.GOOGLE,
        access_token="access",
        refresh_token="refresh",
        account_owner_id=ctx.member_id,
    )


def test_registry_covers_every_channel_entity():
    assert set(REPOSITORIES) == {ConnectedAccount, MessageChannel, CalendarChannel}
    assert isinstance(get_repository(ConnectedAccount), ConnectedAccountRepository)
    assert connected_account_repository() is REPOSITORIES[ConnectedAccount]
    assert message_channel_repository() is REPOSITORIES[MessageChannel]
    assert calendar_channel_repository() is REPOSITORIES[CalendarChannel]


def test_registry_unknown_entity_raises():
    with pytest.raises(ValueError):
        get_repository(Workspace)


def test_tokens_are_encrypted_at_rest(db, test_workspace):
    account = _create_account(db, test_workspace)
    db.commit()

    raw = db.connection().exec_driver_sql(
        "SELECT access_token, refresh_token FROM connected_accounts"
    ).one()
    assert raw[0].startswith("enc:")
    assert "access" not in raw[0][4:]
    assert raw[1].startswith("enc:")

    db.expire_all()
    assert db.get(ConnectedAccount, account.id).access_token == "access"


def test_lookup_by_handle_is_scoped_to_member(db, test_workspace):
    _create_account(db, test_workspace)
    db.commit()

    repo = connected_account_repository()
    assert len(
        repo.get_all_by_handle_and_workspace_member_id(
            db, "jane@example.com", test_workspace.member_id, test_workspace.workspace_id
        )
    ) == 1
    assert repo.get_all_by_handle_and_workspace_member_id(
        db, "jane@example.com", uuid.uuid4(), test_workspace.workspace_id
    ) == []
    assert repo.get_all_by_handle_and_workspace_member_id(
        db, "other@example.com", test_workspace.member_id, test_workspace.workspace_id
    ) == []


def test_mark_auth_failed_then_relink_clears_it(db, test_workspace):
    account = _create_account(db, test_workspace)
    db.commit()
    repo = connected_account_repository()

    repo.mark_auth_failed(db, account.id, test_workspace.workspace_id)
    db.commit()
    assert db.get(ConnectedAccount, account.id).auth_failed_at is not None

    repo.update_access_token_and_refresh_token(
        db, "new-access", "new-refresh", account.id, test_workspace.workspace_id
    )
    db.commit()
    db.expire_all()

    refreshed = db.get(ConnectedAccount, account.id)
    assert refreshed.auth_failed_at is None
    assert refreshed.access_token == "new-access"
    assert refreshed.refresh_token == "new-refresh"


def test_reset_sync_only_touches_the_account_channels(db, test_workspace):
    account = _create_account(db, test_workspace)
    other = _create_account(db, test_workspace, handle="other@example.com")
    repo = message_channel_repository()
    channels = [
        repo.create(
            db,
            id=uuid.uuid4(),
            workspace_id=test_workspace.workspace_id,
            connected_account_id=owner.id,
            type=MessageChannelType.EMAIL,
            handle=owner.handle,
            visibility=MessageChannelVisibility.METADATA,
        )
        for owner in (account, other)
    ]
    for channel in channels:
        repo.mark_sync_succeeded(db, channel, "987", [])
        repo.mark_sync_failed(db, channel, throttled=True)
    db.commit()

    repo.reset_sync(db, account.id, test_workspace.workspace_id)
    db.commit()
    db.expire_all()

    reset, untouched = (db.get(MessageChannel, c.id) for c in channels)
    assert reset.sync_status == MessageChannelSyncStatus.NOT_SYNCED.value
    assert reset.sync_cursor is None
    assert reset.synced_at is None
    assert reset.throttle_failure_count == 0
    assert untouched.sync_status == MessageChannelSyncStatus.FAILED.value
    assert untouched.sync_cursor == "987"
    assert untouched.throttle_failure_count == 1


def test_sync_status_transitions(db, test_workspace):
    account = _create_account(db, test_workspace)
    repo = message_channel_repository()
    channel = repo.create(
        db,
        id=uuid.uuid4(),
        workspace_id=test_workspace.workspace_id,
        connected_account_id=account.id,
        type=MessageChannelType.EMAIL,
        handle=account.handle,
        visibility=MessageChannelVisibility.SHARE_EVERYTHING,
    )

    repo.mark_sync_ongoing(db, channel)
    assert channel.sync_status == MessageChannelSyncStatus.ONGOING.value
    assert channel.sync_stage_started_at is not None

    repo.mark_sync_failed(db, channel, throttled=False)
    assert channel.sync_status == MessageChannelSyncStatus.FAILED.value
    assert channel.throttle_failure_count == 0

    repo.mark_sync_succeeded(db, channel, "42", ["m1", "m2"])
    assert channel.sync_status == MessageChannelSyncStatus.SUCCEEDED.value
    assert channel.sync_cursor == "42"
    assert channel.sync_stage_started_at is None
    assert isinstance(channel.synced_at, datetime)
    assert channel.synced_at.tzinfo == timezone.utc
    assert channel.pending_message_ids == ["m1", "m2"]


def test_fetched_message_ids_accumulate_without_duplicates(db, test_workspace):
    account = _create_account(db, test_workspace)
    repo = message_channel_repository()
    channel = repo.create(
        db,
        id=uuid.uuid4(),
        workspace_id=test_workspace.workspace_id,
        connected_account_id=account.id,
        type=MessageChannelType.EMAIL,
        handle=account.handle,
        visibility=MessageChannelVisibility.SHARE_EVERYTHING,
    )
    repo.mark_sync_succeeded(db, channel, "10", ["a", "b"])
    db.commit()

    repo.mark_sync_succeeded(db, channel, "11", ["b", "c"])
    db.commit()
    db.expire_all()

    stored = db.get(MessageChannel, channel.id)
    assert stored.sync_cursor == "11"
    assert stored.pending_message_ids == ["a", "b", "c"]
