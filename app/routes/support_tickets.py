from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps.auth import AuthContext, filter_by_region, get_auth_context, require_admin
from app.models.support_ticket import SupportTicket
from app.models.user import User
from app.schemas.support_ticket import SupportTicketAdminUpdate, SupportTicketCreate, SupportTicketOut
from app.services.notification_service import notify, notify_admins_of_region


router = APIRouter(prefix="/api", tags=["support-tickets"])


def _ticket_or_404(db: Session, ticket_id: UUID) -> SupportTicket:
    ticket = db.query(SupportTicket).filter(SupportTicket.id == ticket_id).first()
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


def _owner_region(db: Session, ticket: SupportTicket):
    return db.query(User.region).filter(User.id == ticket.user_id).scalar()


@router.post("/support-tickets", response_model=SupportTicketOut)
def create_ticket(
    payload: SupportTicketCreate,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    ticket = SupportTicket(user_id=ctx.user_id, **payload.model_dump())
    db.add(ticket)
    db.flush()
    notify_admins_of_region(db, ctx.region, "New support ticket", ticket.subject)
    db.commit()
    db.refresh(ticket)
    return ticket


@router.get("/support-tickets", response_model=list[SupportTicketOut])
def list_my_tickets(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return (
        db.query(SupportTicket)
        .filter(SupportTicket.user_id == ctx.user_id)
        .order_by(SupportTicket.created_at.desc())
        .all()
    )


@router.get("/support-tickets/{ticket_id}", response_model=SupportTicketOut)
def get_ticket(ticket_id: UUID, ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    ticket = _ticket_or_404(db, ticket_id)
    if ticket.user_id == ctx.user_id:
        return ticket
    if ctx.is_admin and ctx.can_access_region(_owner_region(db, ticket)):
        return ticket
    raise HTTPException(status_code=403, detail="You cannot access this ticket")


@router.get("/admin/support-tickets", response_model=list[SupportTicketOut])
def list_tickets(
    status: str | None = None,
    region: str | None = None,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(SupportTicket).join(User, SupportTicket.user_id == User.id)
    q = filter_by_region(q, User.region, ctx.scope_region(region))
    if status:
        q = q.filter(SupportTicket.status == status)
    return q.order_by(SupportTicket.created_at.desc()).all()


@router.patch("/admin/support-tickets/{ticket_id}", response_model=SupportTicketOut)
def update_ticket(
    ticket_id: UUID,
    payload: SupportTicketAdminUpdate,
    ctx: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ticket = _ticket_or_404(db, ticket_id)
    if not ctx.can_access_region(_owner_region(db, ticket)):
        raise HTTPException(status_code=403, detail="Ticket is outside your region")

    data = payload.model_dump(exclude_unset=True)
    if ticket.status == "closed" and data.get("status", "closed") != "closed":
        raise HTTPException(status_code=400, detail="Closed tickets cannot be reopened")

    for k, v in data.items():
        setattr(ticket, k, v)

    if data.get("admin_response"):
        ticket.responded_by = ctx.user_id
        ticket.responded_at = datetime.utcnow()
        notify(db, ticket.user_id, "Support ticket answered", f"Your ticket \"{ticket.subject}\" has a response.")

    db.commit()
    db.refresh(ticket)
    return ticket
