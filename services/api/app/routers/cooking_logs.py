"""Cooking logs API router.

Endpoints:
- GET /api/cooking-logs - The user's logs, newest first
- POST /api/cooking-logs - Record a cooking outcome
- PUT /api/cooking-logs/{log_id} - Partial update (owner only)
- DELETE /api/cooking-logs/{log_id} - Delete (owner only)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..deps import get_db, parse_positive_id, require_user_id
from ..errors import AuthorizationDenied, NotFound

router = APIRouter()
logger = logging.getLogger("cooklog.logs")


def _get_owned_log(db: Session, raw_id: str, user_id: int, action: str) -> models.CookingLog:
    log_id = parse_positive_id(raw_id, "log_id")
    log = db.get(models.CookingLog, log_id)
    if not log:
        raise NotFound("Cooking log does not exist.")
    if log.user_id != user_id:
        raise AuthorizationDenied(f"You do not have permission to {action} this log.")
    return log


@router.get("/cooking-logs", response_model=schemas.DataResponse[list[schemas.CookingLogListItemOut]])
def list_cooking_logs(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    logs = (
        db.query(models.CookingLog)
        .options(joinedload(models.CookingLog.recipe))
        .filter(models.CookingLog.user_id == user_id)
        .order_by(models.CookingLog.cooked_at.desc(), models.CookingLog.log_id.desc())
        .all()
    )
    data = [
        schemas.CookingLogListItemOut(
            log_id=log.log_id,
            recipe_id=log.recipe_id,
            recipe_title=log.recipe.title if log.recipe else None,
            status=log.status,
            lesson_note=log.lesson_note,
            companion=log.companion,
            cooked_at=log.cooked_at,
        )
        for log in logs
    ]
    return {"success": True, "data": data}


@router.post(
    "/cooking-logs",
    response_model=schemas.MessageDataResponse[schemas.CookingLogOut],
    status_code=status.HTTP_201_CREATED,
)
def create_cooking_log(
    log_in: schemas.CookingLogCreate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    if not db.get(models.Recipe, log_in.recipe_id):
        raise NotFound("Recipe does not exist.")

    log = models.CookingLog(
        user_id=user_id,
        recipe_id=log_in.recipe_id,
        status=log_in.status,
        lesson_note=log_in.lesson_note,
        companion=log_in.companion,
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    logger.info("User %s logged %s for recipe %s", user_id, log.status, log.recipe_id)
    return {
        "success": True,
        "message": "Cooking log saved.",
        "data": schemas.CookingLogOut.model_validate(log),
    }


@router.put("/cooking-logs/{log_id}", response_model=schemas.MessageDataResponse[schemas.CookingLogOut])
def update_cooking_log(
    log_id: str,
    log_in: schemas.CookingLogUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    log = _get_owned_log(db, log_id, user_id, "update")

    for field, value in log_in.model_dump(exclude_unset=True).items():
        setattr(log, field, value)
    db.commit()
    db.refresh(log)

    return {
        "success": True,
        "message": "Cooking log updated.",
        "data": schemas.CookingLogOut.model_validate(log),
    }


@router.delete("/cooking-logs/{log_id}", response_model=schemas.MessageResponse)
def delete_cooking_log(
    log_id: str,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    log = _get_owned_log(db, log_id, user_id, "delete")
    db.delete(log)
    db.commit()
    return {"success": True, "message": "Cooking log deleted."}
