"""
REST API for the activity ledger.
Exposes a day's activities, ledger writes and day analytics over HTTP.

The caller's identity comes from the X-User-Id header, set by whatever
authentication proxy sits in front of the service.
"""

from contextlib import contextmanager
from dataclasses import asdict
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..analytics.summary import ActivityAggregator
from ..categories import CATEGORIES
from ..config import API_VERSION, DB_PATH, MAX_MINUTES_PER_DAY, USER_HEADER
from ..errors import LedgerResult
from ..services.auth import AuthSession, User
from ..services.ledger import ActivityLedger
from ..logger import setup_logger
from .database import SQLiteGateway
from .gateway import SyncGateway

logger = setup_logger(__name__)

# Ledger failure kind -> HTTP status
STATUS_BY_KIND = {
    "invalid_input": 422,
    "budget_exceeded": 409,
    "not_found": 404,
    "not_authenticated": 401,
    "not_loaded": 503,
    "persistence_failed": 502,
}


# ============================================================================
# Models
# ============================================================================

class ActivityWrite(BaseModel):
    """Create or replace an activity."""
    name: str = Field(..., description="Activity name")
    category: str = Field(..., description="Category key, e.g. 'work'")
    duration: int = Field(..., description="Duration in minutes")


class ActivityResponse(BaseModel):
    """Activity response."""
    id: str
    name: str
    category: str
    duration: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DayActivitiesResponse(BaseModel):
    """Activities of one day with the budget state."""
    day: date
    activities: List[ActivityResponse]
    total_minutes: int
    remaining_minutes: int
    max_minutes: int = MAX_MINUTES_PER_DAY


class WriteAccepted(BaseModel):
    """A write was accepted; the new state shows up on the next read."""
    status: str = "accepted"


class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: datetime


# ============================================================================
# Dependencies
# ============================================================================

def get_gateway(request: Request) -> SyncGateway:
    return request.app.state.gateway


async def current_user_id(x_user_id: Optional[str] = Header(None, alias=USER_HEADER)) -> str:
    """Read the caller's uid from the header."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail=f"Missing {USER_HEADER} header")
    return x_user_id


@contextmanager
def open_ledger(gateway: SyncGateway, user_id: str, day: date):
    """A ledger bound to (user_id, day) for the duration of one request."""
    ledger = ActivityLedger(gateway, AuthSession(User(uid=user_id)))
    ledger.select_day(day)
    try:
        if ledger.last_error is not None:
            raise HTTPException(status_code=503, detail=ledger.last_error.message)
        yield ledger
    finally:
        ledger.close()


def _raise_for_result(result: LedgerResult):
    if result.success:
        return
    raise HTTPException(
        status_code=STATUS_BY_KIND.get(result.kind, 500),
        detail=result.to_dict(),
    )


# ============================================================================
# Endpoints
# ============================================================================

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check if API is running."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        timestamp=datetime.now(),
    )


@router.get("/api/v1/categories", tags=["Helpers"])
async def get_categories():
    """All categories with their display metadata."""
    return {"categories": [asdict(info) for info in CATEGORIES.values()]}


@router.get("/api/v1/days/{day}/activities", response_model=DayActivitiesResponse, tags=["Activities"])
async def get_day_activities(
    day: date,
    user_id: str = Depends(current_user_id),
    gateway: SyncGateway = Depends(get_gateway),
):
    """Activities of a day in chronological order."""
    with open_ledger(gateway, user_id, day) as ledger:
        return DayActivitiesResponse(
            day=day,
            activities=[ActivityResponse(**vars(a)) for a in ledger.activities],
            total_minutes=ledger.total_minutes(),
            remaining_minutes=ledger.remaining_minutes(),
            max_minutes=ledger.max_minutes,
        )


@router.post("/api/v1/days/{day}/activities", status_code=202, response_model=WriteAccepted, tags=["Activities"])
async def create_activity(
    day: date,
    activity: ActivityWrite,
    user_id: str = Depends(current_user_id),
    gateway: SyncGateway = Depends(get_gateway),
):
    """Log a new activity, subject to the daily budget."""
    with open_ledger(gateway, user_id, day) as ledger:
        result = await ledger.add_activity(activity.name, activity.category, activity.duration)
    _raise_for_result(result)
    return WriteAccepted()


@router.put(
    "/api/v1/days/{day}/activities/{activity_id}",
    status_code=202,
    response_model=WriteAccepted,
    tags=["Activities"],
)
async def update_activity(
    day: date,
    activity_id: str,
    activity: ActivityWrite,
    user_id: str = Depends(current_user_id),
    gateway: SyncGateway = Depends(get_gateway),
):
    """Edit an activity, subject to the daily budget."""
    with open_ledger(gateway, user_id, day) as ledger:
        result = await ledger.update_activity(activity_id, activity.name, activity.category, activity.duration)
    _raise_for_result(result)
    return WriteAccepted()


@router.delete(
    "/api/v1/days/{day}/activities/{activity_id}",
    status_code=202,
    response_model=WriteAccepted,
    tags=["Activities"],
)
async def delete_activity(
    day: date,
    activity_id: str,
    user_id: str = Depends(current_user_id),
    gateway: SyncGateway = Depends(get_gateway),
):
    """Remove an activity."""
    with open_ledger(gateway, user_id, day) as ledger:
        result = await ledger.delete_activity(activity_id)
    _raise_for_result(result)
    return WriteAccepted()


@router.get("/api/v1/days/{day}/summary", tags=["Analytics"])
async def get_day_summary(
    day: date,
    user_id: str = Depends(current_user_id),
    gateway: SyncGateway = Depends(get_gateway),
):
    """Summary cards, category breakdown, timeline and chart series for a day."""
    with open_ledger(gateway, user_id, day) as ledger:
        aggregator = ActivityAggregator(ledger)
        return {
            "day": day.isoformat(),
            "summary": aggregator.summary().to_dict(),
            "category_totals": aggregator.category_totals(),
            "category_breakdown": [asdict(share) for share in aggregator.category_breakdown()],
            "timeline": [asdict(segment) for segment in aggregator.timeline_segments()],
            "legend": [asdict(info) for info in aggregator.timeline_legend()],
            "pie": asdict(aggregator.pie_series()),
            "bar": asdict(aggregator.bar_series()),
        }


# ============================================================================
# App factory
# ============================================================================

def create_app(gateway: Optional[SyncGateway] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        gateway: Sync gateway to use; defaults to the SQLite database at DB_PATH
    """
    app = FastAPI(
        title="Daytracker API",
        description="Daily activity ledger and analytics",
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.gateway = gateway or SQLiteGateway(DB_PATH)
    app.include_router(router)
    logger.info(f"API ready using {type(app.state.gateway).__name__}")
    return app


_api: Optional[FastAPI] = None


def get_api_app() -> FastAPI:
    """Get the default FastAPI app for mounting."""
    global _api
    if _api is None:
        _api = create_app()
    return _api
