import logging

from sqlalchemy.orm import Session

from app.models.notification import Notification
from app.models.region_config import RegionConfig
from app.models.user import User


logger = logging.getLogger(__name__)


def notify(db: Session, user_id, title: str, message: str, type: str = "info") -> Notification:
    notification = Notification(user_id=user_id, title=title, message=message, type=type)
    db.add(notification)
    db.flush()
    return notification


def _admin_region(db: Session, admin: User) -> str | None:
    if admin.admin_region_id:
        region = db.query(RegionConfig.region).filter(RegionConfig.id == admin.admin_region_id).scalar()
        if region:
            return region
    return admin.region


def notify_admins_of_region(db: Session, region: str | None, title: str, message: str, type: str = "info") -> int:
    """Notify super-admins, plus the regional admins of `region`."""
    candidates = (
        db.query(User)
        .filter(User.is_active.is_(True), User.role.in_(["super-admin", "regional-admin"]))
        .all()
    )
    admins = [
        u
        for u in candidates
        if u.role == "super-admin" or (region is not None and _admin_region(db, u) == region)
    ]
    for admin in admins:
        notify(db, admin.id, title, message, type)
    logger.debug("notified admins", extra={"region": region, "count": len(admins)})
    return len(admins)
