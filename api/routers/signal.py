"""
Signal API - /api/signal route.

GET only. Any other method gets 405 with an Allow header. The presence of
a `force` query parameter (any value) bypasses the response cache.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.schemas import ErrorResponse
from signal_engine.engine import SignalEngine


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Signal"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

METHOD_NOT_ALLOWED = ErrorResponse(error="Method not allowed")
SIGNAL_FAILED = ErrorResponse(error="Failed to generate sentiment signal")


def get_engine(request: Request) -> SignalEngine:
    return request.app.state.engine


@router.api_route(
    "/api/signal",
    methods=ALL_METHODS,
    responses={
        405: {"model": ErrorResponse, "description": "Method other than GET"},
        500: {"model": ErrorResponse, "description": "Signal computation failed"},
    },
)
async def get_signal(request: Request) -> JSONResponse:
    """Compute the current long/short sentiment signal."""
    if request.method != "GET":
        return JSONResponse(
            status_code=405,
            content=METHOD_NOT_ALLOWED.model_dump(),
            headers={"Allow": "GET"},
        )

    force = "force" in request.query_params
    engine = get_engine(request)
    try:
        response = await engine.compute(force=force)
    except Exception:
        logger.exception("Signal computation failed")
        return JSONResponse(
            status_code=500,
            content=SIGNAL_FAILED.model_dump(),
        )
    return JSONResponse(status_code=200, content=response.to_dict())
