from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from Security.rbac import enforce_rbac, require_admin
from .app_context import CurrentUser, get_current_user
from .database import get_db
from .farming_storage import (
    account_to_dict,
    create_farming_account,
    delete_farming_account,
    get_farming_account,
    get_farming_account_with_secrets,
    list_farming_accounts,
    update_farming_account,
)

router = APIRouter(prefix="/api/farming-accounts")


class FarmingAccountIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    social_media: str = Field(alias="socialMedia", min_length=1)
    account_type: Optional[str] = Field(default=None, alias="accountType")
    username: str = Field(min_length=1)
    email: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    password: Optional[str] = None
    two_fa_secret: Optional[str] = Field(default=None, alias="twoFaSecret")
    recovery_email: Optional[str] = Field(default=None, alias="recoveryEmail")


class FarmingAccountUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    social_media: Optional[str] = Field(default=None, alias="socialMedia")
    account_type: Optional[str] = Field(default=None, alias="accountType")
    username: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    password: Optional[str] = None
    two_fa_secret: Optional[str] = Field(default=None, alias="twoFaSecret")
    recovery_email: Optional[str] = Field(default=None, alias="recoveryEmail")
    clear_secrets: List[str] = Field(default_factory=list, alias="clearSecrets")


def _authorized_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    enforce_rbac(user, router.prefix)
    return user


def _get_or_404(db: Session, account_id: int):
    account = get_farming_account(db, account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Farming account not found")
    return account


@router.get("")
def list_accounts(
    social_media: Optional[str] = Query(default=None, alias="socialMedia"),
    status: Optional[str] = None,
    search: Optional[str] = None,
    include_secrets: bool = Query(default=False, alias="includeSecrets"),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(_authorized_user),
):
    if include_secrets:
        require_admin(user)
    accounts = list_farming_accounts(db, social_media, status, search)
    if include_secrets:
        return [get_farming_account_with_secrets(a) for a in accounts]
    return [account_to_dict(a) for a in accounts]


@router.post("", status_code=201)
def create_account(
    payload: FarmingAccountIn,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(_authorized_user),
):
    data = payload.model_dump(exclude_unset=True)
    data["owner_id"] = user.id
    return account_to_dict(create_farming_account(db, data))


@router.get("/{account_id}")
def get_account(
    account_id: int,
    include_secrets: bool = Query(default=False, alias="includeSecrets"),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(_authorized_user),
):
    if include_secrets:
        require_admin(user)
    account = _get_or_404(db, account_id)
    if include_secrets:
        return get_farming_account_with_secrets(account)
    return account_to_dict(account)


@router.api_route("/{account_id}", methods=["PUT", "PATCH"])
def update_account(
    account_id: int,
    payload: FarmingAccountUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(_authorized_user),
):
    account = update_farming_account(db, account_id, payload.model_dump(exclude_unset=True))
    if not account:
        raise HTTPException(status_code=404, detail="Farming account not found")
    return account_to_dict(account)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(_authorized_user),
):
    if not delete_farming_account(db, account_id):
        raise HTTPException(status_code=404, detail="Farming account not found")
    return Response(status_code=204)
