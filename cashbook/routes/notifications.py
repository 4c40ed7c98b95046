# CASHBOOK/backend/cashbook/routes/notifications.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from cashbook.models import models as db_models
from cashbook.schemas import schemas
from cashbook.database import get_db
from cashbook.auth import get_current_user

router = APIRouter(prefix="/notifications", tags=["notifications"])

@router.get("/", response_model=List[schemas.NotificationOut])
def get_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    query = db.query(db_models.Notification).filter(
        db_models.Notification.user_id == current_user.id
    )
    if unread_only:
        query = query.filter(db_models.Notification.is_read == False)  # noqa: E712
    return query.order_by(db_models.Notification.created_at.desc(), db_models.Notification.id.desc()).all()

@router.post("/{notification_id}/read", response_model=schemas.NotificationOut)
def mark_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    notification = db.query(db_models.Notification).filter(
        db_models.Notification.id == notification_id,
        db_models.Notification.user_id == current_user.id
    ).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification non trouvée")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification
