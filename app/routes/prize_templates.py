from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, require_admin
from app.models.prize_template import PrizeTemplate
from app.schemas.master_data import (
    ActiveToggle,
    PrizeTemplateCreate,
    PrizeTemplateOut,
    PrizeTemplateUpdate,
    encode_prize_rule,
)


router = APIRouter(prefix="/api/admin/prize-templates", tags=["admin-master-data"])


def _get_or_404(db: Session, template_id: UUID) -> PrizeTemplate:
    template = db.query(PrizeTemplate).filter(PrizeTemplate.id == template_id).first()
    if not template:
        raise HTTPException(status_code=404, detail="Prize template not found")
    return template


@router.get("", response_model=list[PrizeTemplateOut])
def list_prize_templates(
    type: str | None = None,
    active: bool | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(PrizeTemplate)
    if type:
        q = q.filter(PrizeTemplate.type == type)
    if active is not None:
        q = q.filter(PrizeTemplate.active.is_(active))
    return [PrizeTemplateOut.from_model(t) for t in q.order_by(PrizeTemplate.created_at.desc()).all()]


@router.post("", response_model=PrizeTemplateOut)
def create_prize_template(
    payload: PrizeTemplateCreate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    data = payload.model_dump()
    data["prize_rule"], data["prize_rule_kind"] = encode_prize_rule(payload.prize_rule)
    template = PrizeTemplate(**data)
    db.add(template)
    db.commit()
    db.refresh(template)
    return PrizeTemplateOut.from_model(template)


@router.patch("/{template_id}", response_model=PrizeTemplateOut)
def update_prize_template(
    template_id: UUID,
    payload: PrizeTemplateUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    template = _get_or_404(db, template_id)
    data = payload.model_dump(exclude_unset=True)
    if "prize_rule" in data:
        data["prize_rule"], data["prize_rule_kind"] = encode_prize_rule(payload.prize_rule)
    for k, v in data.items():
        setattr(template, k, v)
    db.commit()
    db.refresh(template)
    return PrizeTemplateOut.from_model(template)


@router.patch("/{template_id}/active", response_model=PrizeTemplateOut)
def toggle_prize_template(
    template_id: UUID,
    payload: ActiveToggle,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    template = _get_or_404(db, template_id)
    template.active = payload.active
    db.commit()
    db.refresh(template)
    return PrizeTemplateOut.from_model(template)


@router.delete("/{template_id}")
def delete_prize_template(template_id: UUID, ctx: AuthContext = Depends(require_admin), db: Session = Depends(get_db)):
    template = _get_or_404(db, template_id)
    db.delete(template)
    db.commit()
    return {"deleted": True}
