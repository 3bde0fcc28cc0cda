"""FastAPI surface for the in-person inspection analysis."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from carverity.analyser import (
    get_config,
    render_report,
    run_analysis,
    run_explanation,
    service_history_guidance,
)
from carverity.utils.errors import (
    ErrorType,
    InspectionError,
    PayloadError,
)


APP_TITLE = "CarVerity - In-person inspection analysis"

logger = logging.getLogger(__name__)

app = FastAPI(title=APP_TITLE)

_STATUS_BY_ERROR = {
    ErrorType.PAYLOAD_NOT_OBJECT: 400,
    ErrorType.PAYLOAD_TOO_LARGE: 413,
}


def _error_status(error: InspectionError) -> int:
    return _STATUS_BY_ERROR.get(error.context.error_type, 500)


async def _read_payload(request: Request) -> Dict[str, Any]:
    body = await request.body()
    limit_kb = get_config().server.max_payload_kb
    if len(body) > limit_kb * 1024:
        raise PayloadError.too_large(len(body), limit_kb)
    
    try:
        payload = json.loads(body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PayloadError.not_an_object("invalid JSON") from e
    
    if not isinstance(payload, dict):
        raise PayloadError.not_an_object(type(payload).__name__)
    return payload


@app.exception_handler(InspectionError)
async def inspection_error_handler(request: Request, exc: InspectionError) -> JSONResponse:
    status = _error_status(exc)
    if status >= 500:
        logger.error(f"Request failed: {exc}")
    else:
        logger.warning(f"Rejected request: {exc}")
    return JSONResponse(
        status_code=status,
        content={"detail": exc.context.message, "error": exc.context.error_type.value},
    )


@app.post("/api/inspections/analyse")
async def analyse_inspection(request: Request) -> JSONResponse:
    payload = await _read_payload(request)
    return JSONResponse(run_analysis(payload))


@app.post("/api/inspections/explain")
async def explain_inspection(request: Request) -> JSONResponse:
    payload = await _read_payload(request)
    return JSONResponse(run_explanation(payload))


@app.post("/api/inspections/report")
async def inspection_report(request: Request) -> Response:
    payload = await _read_payload(request)
    pdf = render_report(payload)
    scan_id = payload.get("scanId") or "inspection"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{scan_id}_report.pdf"'},
    )


@app.post("/api/service-history/guidance")
async def service_history(request: Request) -> JSONResponse:
    payload = await _read_payload(request)
    text: Optional[Any] = payload.get("text")
    if text is not None and not isinstance(text, str):
        raise HTTPException(status_code=400, detail="'text' must be a string.")
    return JSONResponse({"guidance": service_history_guidance(text)})


@app.get("/healthz")
async def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
