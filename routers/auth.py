import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth import (
    TokenIdentity, create_access_token, get_current_identity,
    get_password_hash, verify_password,
)
from config import settings
from database import get_db
from exceptions import InvalidCredential, NotFound, ValidationError
from models import Account, Role
from schemas import AccountRead, LoginRequest, RegisterRequest
from security_middleware import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _session_payload(account: Account, message: str) -> dict:
    return {
        "message": message,
        "token": create_access_token(account),
        "user": AccountRead.model_validate(account).model_dump(mode="json", exclude={"created_at"}),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db)):
    """Create a user account and return a token so the caller is logged in."""
    existing = db.query(Account).filter(
        or_(Account.username == data.username, Account.email == data.email)
    ).first()
    if existing:
        raise ValidationError("Username or email already exists")

    account = Account(
        username=data.username,
        email=data.email,
        password=get_password_hash(data.password),
        role=Role.USER,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration
        db.rollback()
        raise ValidationError("Username or email already exists")
    db.refresh(account)

    logger.info(f"Registered account '{account.username}' (id={account.id})")
    return _session_payload(account, "User registered successfully")


@router.post("/login")
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(request: Request, credentials: LoginRequest, db: Session = Depends(get_db)):
    """Login with rate limiting to slow down brute force attacks."""
    account = db.query(Account).filter(Account.username == credentials.username).first()
    if not account or not verify_password(credentials.password, account.password):
        raise InvalidCredential("Invalid credentials", status_code=status.HTTP_401_UNAUTHORIZED)

    return _session_payload(account, "Login successful")


@router.get("/me")
async def read_current_account(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    account = db.get(Account, identity.id)
    if account is None:
        raise NotFound("User not found")
    return {"user": AccountRead.model_validate(account).model_dump(mode="json")}
