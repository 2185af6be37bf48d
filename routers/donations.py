import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from auth import TokenIdentity, require_admin, require_user
from database import get_db
from exceptions import NotFound
from models import Account, DonationReceived, DonationRequest, RequestStatus
from schemas import (
    DonationCreate, DonationRead, DonationRequestCreate,
    DonationRequestRead, DonationRequestStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/donations", tags=["donations"])


def _with_username(schema, row, username=None) -> dict:
    data = schema.model_validate(row).model_dump(mode="json")
    data["username"] = username
    return data


# ============================================
# Donations received
# ============================================

@router.post("/received", status_code=status.HTTP_201_CREATED)
async def create_donation(
    data: DonationCreate,
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Record a donation made by the caller."""
    donation = DonationReceived(
        user_id=identity.id,
        amount=data.amount,
        description=data.description or "",
    )
    db.add(donation)
    db.commit()
    db.refresh(donation)

    logger.info(f"Donation {donation.id} of {donation.amount} recorded for account {identity.id}")
    return {
        "message": "Donation recorded successfully",
        "donation": _with_username(DonationRead, donation, identity.username),
    }


@router.get("/received")
async def list_donations(
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """List all donations received with the donor's username, newest first."""
    rows = (
        db.query(DonationReceived, Account.username)
        .join(Account, DonationReceived.user_id == Account.id)
        .order_by(desc(DonationReceived.date), desc(DonationReceived.id))
        .all()
    )
    return {"donations": [_with_username(DonationRead, d, username) for d, username in rows]}


@router.delete("/received/{donation_id}")
async def delete_donation(
    donation_id: int,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    deleted = db.query(DonationReceived).filter(
        DonationReceived.id == donation_id
    ).delete(synchronize_session=False)
    if not deleted:
        raise NotFound("Donation not found")
    db.commit()
    return {"message": "Donation deleted successfully"}


# ============================================
# Donation requests
# ============================================

@router.post("/requests", status_code=status.HTTP_201_CREATED)
async def create_donation_request(
    data: DonationRequestCreate,
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Submit a request for items; new requests start out pending."""
    donation_request = DonationRequest(
        user_id=identity.id,
        item_type=data.item_type,
        quantity=data.quantity,
        reason=data.reason or "",
        status=RequestStatus.PENDING,
    )
    db.add(donation_request)
    db.commit()
    db.refresh(donation_request)

    return {
        "message": "Donation request created successfully",
        "request": _with_username(DonationRequestRead, donation_request, identity.username),
    }


@router.get("/requests")
async def list_donation_requests(
    identity: TokenIdentity = Depends(require_user),
    db: Session = Depends(get_db),
):
    rows = (
        db.query(DonationRequest, Account.username)
        .join(Account, DonationRequest.user_id == Account.id)
        .order_by(desc(DonationRequest.date), desc(DonationRequest.id))
        .all()
    )
    return {"requests": [_with_username(DonationRequestRead, r, username) for r, username in rows]}


@router.patch("/requests/{request_id}")
async def update_donation_request_status(
    request_id: int,
    update: DonationRequestStatusUpdate,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Approve, reject or reopen a donation request."""
    donation_request = db.get(DonationRequest, request_id)
    if donation_request is None:
        raise NotFound("Request not found")

    donation_request.status = RequestStatus(update.status)
    db.commit()
    db.refresh(donation_request)

    logger.info(
        f"Admin '{current_admin.username}' set request {request_id} to {donation_request.status.value}"
    )
    return {
        "message": "Request updated successfully",
        "request": _with_username(
            DonationRequestRead, donation_request, donation_request.account.username
        ),
    }


@router.delete("/requests/{request_id}")
async def delete_donation_request(
    request_id: int,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    deleted = db.query(DonationRequest).filter(
        DonationRequest.id == request_id
    ).delete(synchronize_session=False)
    if not deleted:
        raise NotFound("Request not found")
    db.commit()
    return {"message": "Request deleted successfully"}
