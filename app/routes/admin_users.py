import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, filter_by_region, require_admin
from app.models.deal import Deal
from app.models.goals_history import GoalsHistory
from app.models.grand_prize_winner import GrandPrizeWinner
from app.models.notification import Notification
from app.models.points_history import PointsHistory
from app.models.region_config import RegionConfig
from app.models.support_ticket import SupportTicket
from app.models.user import User
from app.models.user_reward import UserReward
from app.schemas.user import UserCreate, UserOut, UserRoleUpdate, UserUpdate
from app.services.auth_service import hash_password
from app.services.notification_service import notify


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/users", tags=["admin-users"])


def _get_user_in_scope(db: Session, ctx: AuthContext, user_id: UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if ctx.is_regional_admin and (user.role == "super-admin" or not ctx.can_access_region(user.region)):
        raise HTTPException(status_code=403, detail="User is outside your region")
    return user


def _validate_user_uniqueness(db: Session, *, user_id: UUID | None, username: str | None, email: str | None, region):
    if username is not None:
        q = db.query(User.id).filter(User.username == username)
        if user_id is not None:
            q = q.filter(User.id != user_id)
        if q.first():
            raise HTTPException(status_code=409, detail="Username already exists")

    if email is not None:
        q = db.query(User.id).filter(User.email == email)
        q = q.filter(User.region.is_(None)) if region is None else q.filter(User.region == region)
        if user_id is not None:
            q = q.filter(User.id != user_id)
        if q.first():
            raise HTTPException(status_code=409, detail="Email already registered in this region")


def _scoped_users(db: Session, ctx: AuthContext):
    q = db.query(User)
    if ctx.is_regional_admin:
        q = q.filter(User.role != "super-admin")
    return filter_by_region(q, User.region, ctx.scope_region())


@router.get("", response_model=list[UserOut])
def list_users(
    role: str | None = None,
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = _scoped_users(db, ctx)
    if not ctx.is_regional_admin:
        q = filter_by_region(q, User.region, ctx.scope_region(region))
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.created_at.desc()).all()


@router.get("/pending", response_model=list[UserOut])
def list_pending_users(ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    q = _scoped_users(db, ctx).filter(
        User.is_active.is_(True),
        User.is_approved.is_(False),
        User.role != "super-admin",
    )
    return q.order_by(User.created_at.asc()).all()


@router.get("/rejected", response_model=list[UserOut])
def list_rejected_users(ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    q = _scoped_users(db, ctx).filter(User.is_active.is_(False))
    return q.order_by(User.updated_at.desc()).all()


@router.put("/{user_id}/approve", response_model=UserOut)
def approve_user(user_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    user = _get_user_in_scope(db, ctx, user_id)
    user.is_approved = True
    user.is_active = True
    user.approved_by = ctx.user_id
    user.approved_at = datetime.utcnow()
    notify(db, user.id, "Account approved", "Your account has been approved. Welcome!", "success")
    db.commit()
    db.refresh(user)
    logger.info("user approved", extra={"user_id": str(user.id), "by": str(ctx.user_id)})
    return user


@router.put("/{user_id}/reject", response_model=UserOut)
def reject_user(user_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    user = _get_user_in_scope(db, ctx, user_id)
    user.is_active = False
    user.is_approved = False
    db.commit()
    db.refresh(user)
    logger.info("user rejected", extra={"user_id": str(user.id), "by": str(ctx.user_id)})
    return user


@router.post("", response_model=UserOut)
def create_user(payload: UserCreate, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    if payload.role in ("regional-admin", "super-admin") and not ctx.is_super_admin:
        raise HTTPException(status_code=403, detail="Only super admins can create this role")
    if payload.role == "regional-admin" and not payload.admin_region_id:
        raise HTTPException(status_code=400, detail="admin_region_id is required for regional admins")
    if ctx.is_regional_admin and payload.region != ctx.region:
        raise HTTPException(status_code=403, detail="User is outside your region")

    _validate_user_uniqueness(
        db, user_id=None, username=payload.username, email=payload.email, region=payload.region
    )

    data = payload.model_dump(exclude={"password"})
    user = User(**data, password_hash=hash_password(payload.password) if payload.password else None)
    if user.is_approved:
        user.approved_by = ctx.user_id
        user.approved_at = datetime.utcnow()

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = _get_user_in_scope(db, ctx, user_id)
    data = payload.model_dump(exclude_unset=True)

    if ctx.is_regional_admin and "region" in data and data["region"] != ctx.region:
        raise HTTPException(status_code=403, detail="User is outside your region")

    _validate_user_uniqueness(
        db,
        user_id=user.id,
        username=data.get("username"),
        email=data.get("email", user.email) if ("email" in data or "region" in data) else None,
        region=data.get("region", user.region),
    )

    password = data.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for k, v in data.items():
        setattr(user, k, v)

    db.commit()
    db.refresh(user)
    return user


@router.patch("/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: UUID,
    payload: UserRoleUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = _get_user_in_scope(db, ctx, user_id)
    if payload.role in ("regional-admin", "super-admin") and not ctx.is_super_admin:
        raise HTTPException(status_code=403, detail="Only super admins can grant this role")

    if payload.role == "regional-admin":
        if not payload.admin_region_id:
            raise HTTPException(status_code=400, detail="admin_region_id is required for regional admins")
        if not db.query(RegionConfig.id).filter(RegionConfig.id == payload.admin_region_id).first():
            raise HTTPException(status_code=404, detail="Region config not found")
        user.admin_region_id = payload.admin_region_id
    else:
        user.admin_region_id = None

    user.role = payload.role
    db.commit()
    db.refresh(user)
    logger.info("user role changed", extra={"user_id": str(user.id), "role": user.role, "by": str(ctx.user_id)})
    return user


@router.delete("/{user_id}")
def delete_user(user_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    if user_id == ctx.user_id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user = _get_user_in_scope(db, ctx, user_id)
    if db.query(GrandPrizeWinner.id).filter(GrandPrizeWinner.user_id == user.id).first():
        raise HTTPException(status_code=409, detail="User has grand prize records and cannot be deleted")

    deal_ids = [d.id for d in db.query(Deal.id).filter(Deal.user_id == user.id).all()]
    db.query(PointsHistory).filter(PointsHistory.user_id == user.id).delete(synchronize_session=False)
    db.query(GoalsHistory).filter(GoalsHistory.user_id == user.id).delete(synchronize_session=False)
    if deal_ids:
        db.query(PointsHistory).filter(PointsHistory.deal_id.in_(deal_ids)).delete(synchronize_session=False)
        db.query(GoalsHistory).filter(GoalsHistory.deal_id.in_(deal_ids)).delete(synchronize_session=False)
    db.query(UserReward).filter(UserReward.user_id == user.id).delete(synchronize_session=False)
    db.query(Deal).filter(Deal.user_id == user.id).delete(synchronize_session=False)
    db.query(Notification).filter(Notification.user_id == user.id).delete(synchronize_session=False)
    db.query(SupportTicket).filter(SupportTicket.user_id == user.id).delete(synchronize_session=False)
    db.query(SupportTicket).filter(SupportTicket.assigned_to == user.id).update(
        {SupportTicket.assigned_to: None}, synchronize_session=False
    )

    db.delete(user)
    db.commit()
    logger.info("user deleted", extra={"user_id": str(user_id), "by": str(ctx.user_id)})
    return {"deleted": True}
