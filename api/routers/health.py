import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from api.schemas import HealthResponse

router = APIRouter(tags=["System Health"])


@router.get("/health", response_model=HealthResponse)
def get_health(request: Request) -> HealthResponse:
    """
    Liveness plus engine status (feeds, caches, model backends).
    """
    state = request.app.state
    engine = getattr(state, "engine", None)
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=time.monotonic() - state.started_at,
        engine=engine.get_status() if engine is not None else None,
    )
