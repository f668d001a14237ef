from datetime import date, datetime, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from .. import models, schemas
from ..deps import get_db, require_user_id
from ..services import stats

router = APIRouter()

EXPIRY_WINDOW_DAYS = 7


@router.get("/dashboard", response_model=schemas.DataResponse[schemas.DashboardOut])
def get_dashboard(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    """
    Home screen summary.
    The four reads are independent and run one after another on the request session.
    """
    now = datetime.now()
    today = now.date()
    (month_start, today_end), (prev_start, prev_end) = stats.month_windows(now)

    Log = models.CookingLog
    monthly_statuses = [
        s for (s,) in db.query(Log.status)
        .filter(Log.user_id == user_id, Log.cooked_at >= month_start, Log.cooked_at <= today_end)
        .all()
    ]

    prev_month_count = (
        db.query(func.count(Log.log_id))
        .filter(Log.user_id == user_id, Log.cooked_at >= prev_start, Log.cooked_at <= prev_end)
        .scalar()
    )

    # Already expired items are included
    expiring = (
        db.query(models.FridgeItem)
        .options(joinedload(models.FridgeItem.master))
        .filter(
            models.FridgeItem.user_id == user_id,
            models.FridgeItem.expiry_date.isnot(None),
            models.FridgeItem.expiry_date <= today + timedelta(days=EXPIRY_WINDOW_DAYS),
        )
        .order_by(models.FridgeItem.expiry_date.asc(), models.FridgeItem.item_id)
        .all()
    )

    latest = (
        db.query(Log)
        .options(joinedload(Log.recipe))
        .filter(Log.user_id == user_id, Log.lesson_note.isnot(None))
        .order_by(Log.cooked_at.desc(), Log.log_id.desc())
        .first()
    )

    data = schemas.DashboardOut(
        monthly_cooking_count=len(monthly_statuses),
        prev_month_cooking_count=prev_month_count or 0,
        monthly_success_rate=stats.success_rate(monthly_statuses),
        expiring_items=[_expiring_out(item, today) for item in expiring],
        latest_lesson=_lesson_out(latest) if latest else None,
    )
    return {"success": True, "data": data}


def _expiring_out(item: models.FridgeItem, today: date) -> schemas.ExpiringItemOut:
    return schemas.ExpiringItemOut(
        item_id=item.item_id,
        name=item.display_name,
        icon_url=item.icon_url,
        expiry_date=item.expiry_date,
        d_day=stats.d_day(item.expiry_date, today),
    )


def _lesson_out(log: models.CookingLog) -> schemas.LatestLessonOut:
    return schemas.LatestLessonOut(
        log_id=log.log_id,
        recipe_title=log.recipe.title if log.recipe else None,
        lesson_note=log.lesson_note,
        cooked_at=log.cooked_at,
    )
