"""Connected account enums."""

from enum import Enum


class ConnectedAccountProvider(str, Enum):
    """External identity providers a workspace member can connect."""

    GOOGLE = "google"
