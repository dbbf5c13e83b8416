from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, get_auth_context
from app.models.region_config import RegionConfig
from app.models.user import User
from app.schemas.auth import CheckUserRoleIn, MagicLinkRequestIn, PasswordlessRegisterIn
from app.schemas.region_config import RegionConfigOut
from app.schemas.user import UserOut
from app.services.auth_service import (
    check_user_role,
    register_passwordless,
    request_magic_link,
    verify_magic_link,
)


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/check-user-role")
def post_check_user_role(payload: CheckUserRoleIn, db: Session = Depends(get_db)):
    return check_user_role(db, payload.email, payload.region)


@router.post("/register-passwordless")
def post_register_passwordless(payload: PasswordlessRegisterIn, db: Session = Depends(get_db)):
    user = register_passwordless(db, payload)
    db.commit()
    db.refresh(user)
    return {
        "message": "Registration received. An administrator will review your account.",
        "user": UserOut.model_validate(user),
    }


@router.post("/request-magic-link")
def post_request_magic_link(payload: MagicLinkRequestIn, db: Session = Depends(get_db)):
    request_magic_link(db, payload.email, payload.region)
    db.commit()
    return {"userExists": True, "emailSent": True}


@router.get("/verify-magic-link/{token}", response_model=UserOut)
def get_verify_magic_link(token: str, db: Session = Depends(get_db)):
    user = verify_magic_link(db, token)
    # token is consumed even when the account is still waiting for approval
    db.commit()
    db.refresh(user)
    if not user.is_approved:
        raise HTTPException(status_code=403, detail="Your account is pending approval")
    return user


@router.get("/me")
def get_me(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == ctx.user_id).first()
    admin_region = None
    if ctx.is_regional_admin and ctx.admin_region_id:
        config = db.query(RegionConfig).filter(RegionConfig.id == ctx.admin_region_id).first()
        if config:
            admin_region = RegionConfigOut.model_validate(config)
    return {"user": UserOut.model_validate(user), "adminRegion": admin_region}
