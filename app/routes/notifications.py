from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context
from app.models.notification import Notification
from app.schemas.notification import NotificationOut


router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
def list_notifications(
    unread: bool | None = None,
    limit: int = 50,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    limit = max(1, min(limit, 500))
    q = db.query(Notification).filter(Notification.user_id == ctx.user_id)
    if unread:
        q = q.filter(Notification.is_read.is_(False))
    return q.order_by(Notification.created_at.desc()).limit(limit).all()


@router.patch("/read-all")
def mark_all_read(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == ctx.user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return {"updated": updated}


@router.patch("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    if notification.user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="You cannot modify this notification")
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification
