from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.region_config import RegionConfig
from app.models.user import User


ADMIN_ROLES = ("admin", "regional-admin", "super-admin")


@dataclass(frozen=True)
class AuthContext:
    user_id: UUID
    role: str
    region: str | None
    admin_region_id: UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_regional_admin(self) -> bool:
        return self.role == "regional-admin"

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super-admin"

    def scope_region(self, requested: str | None = None) -> str | None:
        """Region filter to apply for this caller, None meaning unfiltered.

        Regional admins are pinned to their own region whatever they ask for.
        """
        if self.is_regional_admin:
            return self.region
        if not requested or requested == "all":
            return None
        return requested

    def can_access_region(self, region: str | None) -> bool:
        if not self.is_regional_admin:
            return True
        return region is not None and region == self.region


def get_auth_context(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> AuthContext:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Not authenticated")

    region = user.region
    if user.role == "regional-admin" and user.admin_region_id:
        admin_region = db.query(RegionConfig).filter(RegionConfig.id == user.admin_region_id).first()
        if admin_region:
            region = admin_region.region

    return AuthContext(
        user_id=user.id,
        role=user.role,
        region=region,
        admin_region_id=user.admin_region_id,
    )


def require_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not ctx.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    if ctx.is_regional_admin and not ctx.region:
        raise HTTPException(status_code=403, detail="No region assigned to this administrator")
    return ctx


def require_super_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not ctx.is_super_admin:
        raise HTTPException(status_code=403, detail="Super admin access required")
    return ctx


def filter_by_region(query, column, region: str | None):
    """Apply a resolved scope region to `query`; None leaves it unfiltered."""
    if region is None:
        return query
    return query.filter(column == region)


def get_current_user(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)) -> User:
    return db.query(User).filter(User.id == ctx.user_id).first()
