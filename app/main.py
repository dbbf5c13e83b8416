import logging
import os

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.db import engine, Base

from app.models.user import User
from app.models.deal import Deal
from app.models.reward import Reward
from app.models.user_reward import UserReward
from app.models.points_history import PointsHistory
from app.models.goals_history import GoalsHistory
from app.models.points_config import PointsConfig
from app.models.region_config import RegionConfig
from app.models.monthly_region_prize import MonthlyRegionPrize
from app.models.grand_prize_criteria import GrandPrizeCriteria
from app.models.grand_prize_winner import GrandPrizeWinner
from app.models.support_ticket import SupportTicket
from app.models.category_master import CategoryMaster
from app.models.region_category import RegionCategory
from app.models.prize_template import PrizeTemplate
from app.models.product_type import ProductType
from app.models.notification import Notification
from app.models.audit_log import AuditLog

from app.routes.auth import router as auth_router
from app.routes.users import router as users_router
from app.routes.admin_users import router as admin_users_router
from app.routes.deals import router as deals_router
from app.routes.admin_deals import router as admin_deals_router
from app.routes.rewards import router as rewards_router
from app.routes.admin_rewards import router as admin_rewards_router
from app.routes.regions import router as regions_router
from app.routes.points_config import router as points_config_router
from app.routes.monthly_prizes import router as monthly_prizes_router
from app.routes.grand_prize import router as grand_prize_router
from app.routes.support_tickets import router as support_tickets_router
from app.routes.categories_master import router as categories_master_router
from app.routes.region_categories import router as region_categories_router
from app.routes.prize_templates import router as prize_templates_router
from app.routes.product_types import router as product_types_router
from app.routes.notifications import router as notifications_router
from app.routes.reports import router as reports_router
from app.routes.admin import router as admin_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Incentive Program API")

# ─── CORS ─────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── errors: every body is {"message": ...} ──────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid data", "errors": jsonable_encoder(exc.errors(), custom_encoder={Exception: str})},
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("integrity error", extra={"path": request.url.path, "error": str(exc.orig)})
    return JSONResponse(status_code=409, content={"message": "Conflict with existing data"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error", extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(admin_users_router)
app.include_router(deals_router)
app.include_router(admin_deals_router)
app.include_router(rewards_router)
app.include_router(admin_rewards_router)
app.include_router(regions_router)
app.include_router(points_config_router)
app.include_router(monthly_prizes_router)
app.include_router(grand_prize_router)
app.include_router(support_tickets_router)
app.include_router(categories_master_router)
app.include_router(region_categories_router)
app.include_router(prize_templates_router)
app.include_router(product_types_router)
app.include_router(notifications_router)
app.include_router(reports_router)
app.include_router(admin_router)


@app.get("/")
def read_root():
    return {"message": "Incentive Program API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001, reload=True)
