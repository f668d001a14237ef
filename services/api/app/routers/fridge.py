"""Fridge inventory API router.

Endpoints:
- GET /api/fridge - List items, soonest expiry first
- POST /api/fridge - Add item (catalog defaults for unit and expiry)
- PUT /api/fridge/{item_id} - Partial update (owner only)
- DELETE /api/fridge/{item_id} - Delete (owner only)
"""

import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..deps import get_db, parse_positive_id, require_user_id
from ..errors import AuthorizationDenied, NotFound
from ..services.stats import d_day

router = APIRouter()
logger = logging.getLogger("cooklog.fridge")


def _item_out(item: models.FridgeItem, today: date) -> schemas.FridgeItemOut:
    return schemas.FridgeItemOut(
        item_id=item.item_id,
        name=item.display_name,
        icon_url=item.icon_url,
        quantity=float(item.quantity) if item.quantity is not None else None,
        unit=item.unit,
        expiry_date=item.expiry_date,
        d_day=d_day(item.expiry_date, today),
    )


def _get_owned_item(db: Session, raw_id: str, user_id: int, action: str) -> models.FridgeItem:
    """404 when absent, 403 when it belongs to someone else."""
    item_id = parse_positive_id(raw_id, "item_id")
    item = db.get(models.FridgeItem, item_id)
    if not item:
        raise NotFound("Fridge item does not exist.")
    if item.user_id != user_id:
        raise AuthorizationDenied(f"You do not have permission to {action} this item.")
    return item


@router.get("/fridge", response_model=schemas.DataResponse[list[schemas.FridgeItemOut]])
def list_fridge_items(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    items = (
        db.query(models.FridgeItem)
        .options(joinedload(models.FridgeItem.master))
        .filter(models.FridgeItem.user_id == user_id)
        .order_by(models.FridgeItem.expiry_date.asc().nulls_last(), models.FridgeItem.item_id)
        .all()
    )
    today = date.today()
    return {"success": True, "data": [_item_out(item, today) for item in items]}


@router.post(
    "/fridge",
    response_model=schemas.MessageDataResponse[schemas.FridgeItemCreatedOut],
    status_code=status.HTTP_201_CREATED,
)
def create_fridge_item(
    item_in: schemas.FridgeItemCreate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Exact-name catalog match fills in unit and shelf-life expiry the caller left out."""
    master = (
        db.query(models.IngredientMaster)
        .filter(models.IngredientMaster.name == item_in.name)
        .first()
    )

    expiry_date = item_in.expiry_date
    if expiry_date is None and master is not None and master.base_shelf_life is not None:
        expiry_date = date.today() + timedelta(days=master.base_shelf_life)

    unit = item_in.unit
    if unit is None and master is not None:
        unit = master.default_unit

    item = models.FridgeItem(
        user_id=user_id,
        master_id=master.master_id if master else None,
        custom_name=None if master else item_in.name,
        quantity=item_in.quantity if item_in.quantity is not None else 1,
        unit=unit,
        expiry_date=expiry_date,
    )
    db.add(item)
    db.commit()
    db.refresh(item)

    return {
        "success": True,
        "message": "Item added to the fridge.",
        "data": schemas.FridgeItemCreatedOut.model_validate(item),
    }


@router.put("/fridge/{item_id}", response_model=schemas.MessageDataResponse[schemas.FridgeItemOut])
def update_fridge_item(
    item_id: str,
    item_in: schemas.FridgeItemUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    item = _get_owned_item(db, item_id, user_id, "update")

    for field, value in item_in.model_dump(exclude_unset=True).items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)

    return {
        "success": True,
        "message": "Item updated.",
        "data": _item_out(item, date.today()),
    }


@router.delete("/fridge/{item_id}", response_model=schemas.MessageResponse)
def delete_fridge_item(
    item_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    item = _get_owned_item(db, item_id, user_id, "delete")
    db.delete(item)
    db.commit()
    return {"success": True, "message": "Item deleted."}
