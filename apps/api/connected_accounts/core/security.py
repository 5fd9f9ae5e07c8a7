"""Security utilities for signed OAuth state tokens."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from connected_accounts.core.config import settings
from connected_accounts.schemas.connected_account import GoogleAPIsOAuthContext

OAUTH_STATE_AUDIENCE = "google-apis-oauth"


class InvalidOAuthStateError(Exception):
    """OAuth state is missing, expired, tampered with or bound to another browser."""


def hash_user_agent(user_agent: str) -> str:
    """
    Create a hash of user-agent for binding to OAuth state.

    An attacker would need to use the same browser to replay a stolen state.
    """
    return hashlib.sha256(user_agent.encode()).hexdigest()[:16]


def create_oauth_state_token(context: GoogleAPIsOAuthContext, user_agent: str) -> str:
    """
    Create a signed, short-lived OAuth state carrying the linking context.

    Includes a random nonce so two consent flows never share a state value.
    """
    now = datetime.now(timezone.utc)
    payload = {
        **context.model_dump(mode="json"),
        "nonce": secrets.token_urlsafe(16),
        "ua_hash": hash_user_agent(user_agent),
        "aud": OAUTH_STATE_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(seconds=settings.OAUTH_STATE_MAX_AGE_SECONDS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def parse_oauth_state_token(token: str, user_agent: str) -> GoogleAPIsOAuthContext:
    """
    Verify an OAuth state token and return the linking context.

    Raises:
        InvalidOAuthStateError: signature, expiry, audience or user-agent check failed
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=["HS256"],
            audience=OAUTH_STATE_AUDIENCE,
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidOAuthStateError("Invalid OAuth state") from exc

    if payload.get("ua_hash") != hash_user_agent(user_agent):
        raise InvalidOAuthStateError("User-agent mismatch - possible session hijack")

    return GoogleAPIsOAuthContext.model_validate(payload)
