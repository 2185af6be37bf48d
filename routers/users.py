import logging

from fastapi import APIRouter, Depends
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth import TokenIdentity, get_password_hash, require_admin, require_user, verify_password
from database import get_db
from exceptions import InvalidCredential, NotFound, ValidationError
from models import Account, Role
from schemas import AccountRead, AccountUpdate, PasswordChange

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _serialize(account: Account) -> dict:
    return AccountRead.model_validate(account).model_dump(mode="json")


@router.get("")
async def list_users(
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """List all accounts, newest first."""
    accounts = db.query(Account).order_by(desc(Account.created_at), desc(Account.id)).all()
    return {"users": [_serialize(account) for account in accounts]}


@router.post("/change-password")
async def change_password(
    data: PasswordChange,
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Change the caller's own password after re-checking the current one."""
    account = db.get(Account, identity.id)
    if account is None:
        raise NotFound("User not found")

    if not verify_password(data.currentPassword, account.password):
        raise InvalidCredential("Current password is incorrect", status_code=401)

    account.password = get_password_hash(data.newPassword)
    db.commit()

    logger.info(f"Account {account.id} changed its password")
    return {"message": "Password changed successfully"}


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    account = db.get(Account, user_id)
    if account is None:
        raise NotFound("User not found")
    return {"user": _serialize(account)}


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    update: AccountUpdate,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update profile fields and, when given, the role of an account."""
    account = db.get(Account, user_id)
    if account is None:
        raise NotFound("User not found")

    account.username = update.username
    account.email = update.email
    if update.role is not None:
        account.role = Role(update.role)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Username or email already exists")
    db.refresh(account)

    return {"message": "User updated successfully", "user": _serialize(account)}


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if user_id == current_admin.id:
        raise ValidationError("Cannot delete your own account")

    deleted = db.query(Account).filter(Account.id == user_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFound("User not found")
    db.commit()

    logger.info(f"Admin '{current_admin.username}' deleted account {user_id}")
    return {"message": "User deleted successfully"}
