"""Connected accounts read API."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from connected_accounts.core.deps import get_data_store
from connected_accounts.repositories import connected_account_repository
from connected_accounts.schemas.connected_account import (
    ConnectedAccountListResponse,
    ConnectedAccountRead,
)
from connected_accounts.services.data_source_service import (
    DataSourceNotFoundError,
    SqlAlchemyDataStore,
)

router = APIRouter(prefix="/connected-accounts", tags=["Connected Accounts"])


@router.get("", response_model=ConnectedAccountListResponse)
def list_connected_accounts(
    workspace_id: UUID,
    workspace_member_id: UUID,
    data_store: SqlAlchemyDataStore = Depends(get_data_store),
) -> ConnectedAccountListResponse:
    """List a member's connected accounts with their channels."""
    try:
        connection = data_store.resolve_connection(workspace_id)
    except DataSourceNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workspace not found",
        )

    with connection.session() as session:
        accounts = connected_account_repository().get_all_by_workspace_member_id(
            session, workspace_member_id, workspace_id
        )
        items = [ConnectedAccountRead.model_validate(a) for a in accounts]

    return ConnectedAccountListResponse(items=items)
