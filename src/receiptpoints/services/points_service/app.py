from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...config import Settings
from ...engine import PointsEngine
from ...errors import INVALID_RECEIPT_MESSAGE
from ...models import ErrorResponse, PointsResponse, ReceiptIdResponse
from ...result import Err
from ...storage import create_score_store

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Empty or undecodable request bodies.
    logger.info("Unusable request body on %s: %s", request.url.path, exc.errors())
    return _error(400, INVALID_RECEIPT_MESSAGE)


def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


def get_engine(request: Request) -> PointsEngine:
    return request.app.state.engine


def create_app(engine: PointsEngine | None = None, settings: Settings | None = None) -> FastAPI:
    if engine is None:
        settings = settings or Settings.detect()
        engine = PointsEngine(create_score_store(settings))

    app = FastAPI(title="Receipt Points Service", version="0.1.0")
    app.state.engine = engine
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    @app.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    @app.post(
        "/receipts/process",
        response_model=ReceiptIdResponse,
        responses={400: {"model": ErrorResponse}},
    )
    def process_receipt(
        document: Any = Body(...),
        engine: PointsEngine = Depends(get_engine),
    ) -> ReceiptIdResponse | JSONResponse:
        result = engine.process_receipt(document)
        if isinstance(result, Err):
            return _error(400, result.error.message)
        return ReceiptIdResponse(id=result.value.id)

    @app.get(
        "/receipts/{receipt_id}/points",
        response_model=PointsResponse,
        responses={404: {"model": ErrorResponse}},
    )
    def get_points(receipt_id: str, engine: PointsEngine = Depends(get_engine)) -> PointsResponse | JSONResponse:
        result = engine.lookup_points(receipt_id)
        if isinstance(result, Err):
            return _error(404, result.error.message)
        return PointsResponse(points=result.value)

    return app


app = create_app()
