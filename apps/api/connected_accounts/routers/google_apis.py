"""Google APIs OAuth router.

A workspace member grants Gmail + Calendar access; the callback links (or
re-links) the Google account and kicks off the initial sync jobs.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from connected_accounts.core.config import settings
from connected_accounts.core.deps import (
    get_calendar_queue,
    get_data_store,
    get_db,
    get_feature_flags,
    get_messaging_queue,
)
from connected_accounts.core.rate_limit import OAUTH_RATE_LIMIT, limiter
from connected_accounts.core.security import (
    InvalidOAuthStateError,
    create_oauth_state_token,
    parse_oauth_state_token,
)
from connected_accounts.core.structured_logging import build_log_context
from connected_accounts.db.enums import CalendarChannelVisibility, MessageChannelVisibility
from connected_accounts.db.models import WorkspaceMember
from connected_accounts.schemas.connected_account import (
    GoogleAccountLink,
    GoogleAPIsOAuthContext,
)
from connected_accounts.services import google_apis_service, oauth_service
from connected_accounts.services.data_source_service import DataSourceNotFoundError

router = APIRouter(prefix="/auth/google-apis", tags=["Google APIs"])
logger = logging.getLogger(__name__)

SUCCESS_REDIRECT_PATH = "/settings/accounts/emails"
ERROR_REDIRECT_PATH = "/settings/accounts"


def _error_redirect(code: str) -> RedirectResponse:
    return RedirectResponse(
        f"{settings.FRONTEND_URL}{ERROR_REDIRECT_PATH}?error={code}",
        status_code=302,
    )


@router.get("")
@limiter.limit(OAUTH_RATE_LIMIT)
def google_apis_connect(
    request: Request,
    workspace_id: UUID,
    workspace_member_id: UUID,
    message_visibility: MessageChannelVisibility | None = None,
    calendar_visibility: CalendarChannelVisibility | None = None,
    db: Session = Depends(get_db),
) -> dict[str, str]:
    """Get the Google consent URL.

    Frontend should redirect the user to this URL.
    """
    if not settings.google_apis_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google APIs integration not configured. Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET.",
        )

    member = (
        db.query(WorkspaceMember)
        .filter(
            WorkspaceMember.id == workspace_member_id,
            WorkspaceMember.workspace_id == workspace_id,
        )
        .first()
    )
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workspace member not found",
        )

    context = GoogleAPIsOAuthContext(
        workspace_id=workspace_id,
        workspace_member_id=workspace_member_id,
        message_visibility=message_visibility,
        calendar_visibility=calendar_visibility,
    )
    state = create_oauth_state_token(context, request.headers.get("user-agent", ""))
    auth_url = oauth_service.get_google_apis_auth_url(settings.GOOGLE_APIS_CALLBACK_URL, state)
    return {"auth_url": auth_url}


@router.get("/get-access-token")
@limiter.limit(OAUTH_RATE_LIMIT)
async def google_apis_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    data_store=Depends(get_data_store),
    feature_flags=Depends(get_feature_flags),
    messaging_queue=Depends(get_messaging_queue),
    calendar_queue=Depends(get_calendar_queue),
) -> RedirectResponse:
    """Handle the Google OAuth callback and link the account."""
    if error:
        # User declined consent
        return _error_redirect("access_denied")
    if not code or not state:
        return _error_redirect("invalid_request")

    try:
        context = parse_oauth_state_token(state, request.headers.get("user-agent", ""))
    except InvalidOAuthStateError:
        return _error_redirect("invalid_state")

    log_context = build_log_context(
        workspace_id=str(context.workspace_id),
        workspace_member_id=str(context.workspace_member_id),
        route="/auth/google-apis/get-access-token",
        method="GET",
    )

    try:
        tokens = await oauth_service.exchange_google_apis_code(
            code, settings.GOOGLE_APIS_CALLBACK_URL
        )
        user_info = await oauth_service.get_google_user_info(tokens["access_token"])
    except oauth_service.GoogleOAuthError:
        logger.warning("Google OAuth exchange failed", extra=log_context)
        return _error_redirect("google_failed")

    handle = user_info.get("email")
    if not handle:
        return _error_redirect("missing_email")

    link = GoogleAccountLink(
        handle=handle,
        workspace_id=context.workspace_id,
        workspace_member_id=context.workspace_member_id,
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
        calendar_visibility=context.calendar_visibility,
        message_visibility=context.message_visibility,
    )

    try:
        google_apis_service.refresh_google_refresh_token(
            link,
            data_store=data_store,
            feature_flags=feature_flags,
            messaging_queue=messaging_queue,
            calendar_queue=calendar_queue,
        )
    except DataSourceNotFoundError:
        logger.error("Workspace has no data source", extra=log_context)
        return _error_redirect("workspace_unavailable")
    except google_apis_service.ConnectedAccountTransactionError:
        return _error_redirect("link_failed")
    except google_apis_service.SyncJobDispatchError:
        # Account is linked; sync starts on the next re-link
        logger.error("Account linked but sync jobs were not enqueued", extra=log_context)

    return RedirectResponse(f"{settings.FRONTEND_URL}{SUCCESS_REDIRECT_PATH}", status_code=302)
