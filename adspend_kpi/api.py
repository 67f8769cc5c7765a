"""
FastAPI transport for the KPI comparison.

  uvicorn adspend_kpi.api:app --host 0.0.0.0 --port 9001

Errors raised by the pipeline come back as {"error": ..., "detail": ...}
JSON bodies, never as unhandled exceptions.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .exceptions import AdSpendError
from .services import KPIService

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


class ComparisonRequest(BaseModel):
    """Parameters produced by the upstream agent."""

    end_date: Optional[date] = None
    days: Optional[int] = None


def _error(status_code: int, error: str, detail: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": error, "detail": detail}
    )


def create_app(service: Optional[KPIService] = None) -> FastAPI:
    """Build the app around a KPIService (a fresh in-memory one by default)."""
    app = FastAPI(title="Ad Spend KPI")
    app.state.service = service or KPIService()

    @app.exception_handler(AdSpendError)
    async def handle_pipeline_error(
        request: Request, exc: AdSpendError
    ) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return _error(400, type(exc).__name__, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(400, "RequestValidationError", jsonable_errors(exc))

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "rows": len(app.state.service.store)}

    @app.get("/kpi/comparison")
    def get_comparison(
        end_date: Optional[date] = None, days: Optional[int] = None
    ) -> list[dict]:
        service: KPIService = app.state.service
        return service.to_response(service.compare(end_date, days))

    @app.post("/kpi/comparison")
    def post_comparison(body: ComparisonRequest) -> list[dict]:
        service: KPIService = app.state.service
        return service.to_response(service.compare(body.end_date, body.days))

    @app.post("/ingest")
    async def ingest(
        request: Request, source_file_name: str = "upload.csv"
    ) -> JSONResponse:
        raw = await request.body()
        try:
            raw_text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            return _error(400, "UnicodeDecodeError", str(e))

        stats = await run_in_threadpool(
            app.state.service.ingest, raw_text, source_file_name
        )
        return JSONResponse(
            content={
                "source_file_name": source_file_name,
                "total_lines": stats.total_lines,
                "accepted": stats.accepted,
                "skipped": stats.skipped,
                "defaulted_values": stats.defaulted_values,
            }
        )

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors reduced to their JSON-safe fields."""
    return [
        {
            "loc": list(e.get("loc", ())),
            "msg": e.get("msg", ""),
            "type": e.get("type", ""),
        }
        for e in exc.errors()
    ]


app = create_app()
