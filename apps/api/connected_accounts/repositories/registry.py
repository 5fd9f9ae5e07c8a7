"""Repository registry.

Maps each workspace entity to the repository that persists it. Built once at
import time.
"""

from __future__ import annotations

from typing import Mapping

from connected_accounts.db.models import CalendarChannel, ConnectedAccount, MessageChannel
from connected_accounts.repositories.calendar_channel_repository import (
    CalendarChannelRepository,
)
from connected_accounts.repositories.connected_account_repository import (
    ConnectedAccountRepository,
)
from connected_accounts.repositories.message_channel_repository import (
    MessageChannelRepository,
)

REPOSITORIES: Mapping[type, object] = {
    ConnectedAccount: ConnectedAccountRepository(),
    MessageChannel: MessageChannelRepository(),
    CalendarChannel: CalendarChannelRepository(),
}


def get_repository(entity: type) -> object:
    repository = REPOSITORIES.get(entity)
    if repository is None:
        raise ValueError(f"No repository registered for {entity.__name__}")
    return repository


def connected_account_repository() -> ConnectedAccountRepository:
    return get_repository(ConnectedAccount)  # type: ignore[return-value]


def message_channel_repository() -> MessageChannelRepository:
    return get_repository(MessageChannel)  # type: ignore[return-value]


def calendar_channel_repository() -> CalendarChannelRepository:
    return get_repository(CalendarChannel)  # type: ignore[return-value]
