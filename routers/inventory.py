from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from auth import TokenIdentity, get_current_identity, require_admin
from database import get_db
from exceptions import NotFound
from models import InventoryItem, utcnow
from schemas import InventoryItemRead, InventoryItemWrite

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def _serialize(item: InventoryItem) -> dict:
    return InventoryItemRead.model_validate(item).model_dump(mode="json")


@router.get("")
async def list_inventory(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    items = db.query(InventoryItem).order_by(InventoryItem.category, InventoryItem.item_name).all()
    return {"inventory": [_serialize(item) for item in items]}


@router.get("/{item_id}")
async def get_inventory_item(
    item_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    item = db.get(InventoryItem, item_id)
    if item is None:
        raise NotFound("Item not found")
    return {"item": _serialize(item)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    data: InventoryItemWrite,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    item = InventoryItem(
        item_name=data.item_name,
        category=data.category,
        quantity=data.quantity or 0,
        size=data.size or "",
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return {"message": "Item created successfully", "item": _serialize(item)}


@router.put("/{item_id}")
async def update_inventory_item(
    item_id: int,
    data: InventoryItemWrite,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Replace an item's fields; last_updated is refreshed on every write."""
    item = db.get(InventoryItem, item_id)
    if item is None:
        raise NotFound("Item not found")

    item.item_name = data.item_name
    item.category = data.category
    item.quantity = data.quantity or 0
    item.size = data.size or ""
    item.last_updated = utcnow()
    db.commit()
    db.refresh(item)

    return {"message": "Item updated successfully", "item": _serialize(item)}


@router.delete("/{item_id}")
async def delete_inventory_item(
    item_id: int,
    current_admin: TokenIdentity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    deleted = db.query(InventoryItem).filter(InventoryItem.id == item_id).delete(synchronize_session=False)
    if not deleted:
        raise NotFound("Item not found")
    db.commit()
    return {"message": "Item deleted successfully"}
