# simple_finance/routers/cron.py
"""
Scheduled snapshot trigger.

POST /cron/snapshot is called once a day by an external scheduler with
`Authorization: Bearer <CRON_TOKEN>`. It values every holding and upserts
the snapshot for today's date.

Responses:
    500 {"error": "Server configuration error"}               CRON_TOKEN unset
    401 {"error": "Missing or invalid authorization header"}  no "Bearer " header
    401 {"error": "Invalid authorization token"}              token mismatch
    200 {"message": "No products found, ...", "totalValue": 0}
    200 {"message": "Portfolio snapshot created successfully", "snapshot": ..., "stats": ...}
    500 {"error": "Failed to create portfolio snapshot"}      anything else
"""

import logging
import secrets

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from simple_finance.config import settings
from simple_finance.dependencies import get_holding_store, get_snapshot_recorder
from simple_finance.middleware.rate_limit import RATE_LIMIT_CRON, limiter
from simple_finance.repositories import SqlAlchemyHoldingStore
from simple_finance.schemas.errors import TriggerError
from simple_finance.schemas.snapshots import (
    SnapshotBody,
    SnapshotCreatedResponse,
    SnapshotSkippedResponse,
    SnapshotStats,
)
from simple_finance.services.snapshot_recorder import SnapshotRecorder

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

SERVER_CONFIG_ERROR = "Server configuration error"
MISSING_AUTH_HEADER = "Missing or invalid authorization header"
INVALID_TOKEN = "Invalid authorization token"
SNAPSHOT_FAILED = "Failed to create portfolio snapshot"

router = APIRouter(
    prefix="/cron",
    tags=["Cron"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=TriggerError(error=message).model_dump())


def _check_authorization(request: Request) -> JSONResponse | None:
    """Return an error response when the caller is not allowed, else None."""
    expected = settings.cron_token
    if not expected:
        logger.error("CRON_TOKEN is not set; refusing snapshot trigger")
        return _error(500, SERVER_CONFIG_ERROR)

    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        return _error(401, MISSING_AUTH_HEADER)

    token = header[len(BEARER_PREFIX):]
    if not secrets.compare_digest(token.encode(), expected.encode()):
        logger.warning("Snapshot trigger rejected: invalid token")
        return _error(401, INVALID_TOKEN)

    return None


@router.post(
    "/snapshot",
    summary="Record today's portfolio snapshot",
    responses={
        200: {"model": SnapshotCreatedResponse},
        401: {"model": TriggerError, "description": "Missing or invalid bearer token"},
        500: {"model": TriggerError, "description": "Server misconfigured or snapshot failed"},
    },
)
@limiter.limit(RATE_LIMIT_CRON)
def create_snapshot(
        request: Request,
        holding_store: SqlAlchemyHoldingStore = Depends(get_holding_store),
        recorder: SnapshotRecorder = Depends(get_snapshot_recorder),
) -> JSONResponse:
    """
    Value the portfolio and upsert today's snapshot.

    Running it twice on the same day overwrites that day's value.
    """
    denied = _check_authorization(request)
    if denied is not None:
        return denied

    try:
        result = recorder.record_daily_snapshot(holding_store.list_all())
    except Exception as e:
        logger.exception(f"Error creating portfolio snapshot: {e}")
        return _error(500, SNAPSHOT_FAILED)

    if not result.recorded:
        body = SnapshotSkippedResponse(message=result.message, total_value=0)
        return JSONResponse(status_code=200, content=body.model_dump(mode="json", by_alias=True))

    body = SnapshotCreatedResponse(
        message=result.message,
        snapshot=SnapshotBody(date=result.snapshot.date, value=result.snapshot.value),
        stats=SnapshotStats(
            total_value=result.statistics.total_value,
            total_return=result.statistics.total_return,
            total_return_percentage=result.statistics.total_return_percentage,
        ),
    )
    return JSONResponse(status_code=200, content=body.model_dump(mode="json", by_alias=True))
