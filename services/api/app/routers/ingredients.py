from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..deps import get_db, require_user_id

router = APIRouter()

AUTOCOMPLETE_LIMIT = 50


@router.get("/ingredients/master", response_model=schemas.DataResponse[list[schemas.IngredientMasterOut]])
def search_ingredient_master(
    q: Optional[str] = None,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Catalog autocomplete: case-insensitive substring match on name."""
    query = db.query(models.IngredientMaster)

    q = (q or "").strip()
    if q:
        query = query.filter(func.lower(models.IngredientMaster.name).contains(q.lower()))

    items = query.order_by(models.IngredientMaster.name.asc()).limit(AUTOCOMPLETE_LIMIT).all()
    return {"success": True, "data": items}
