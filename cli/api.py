from __future__ import annotations

import logging
from typing import Any, Dict

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse

from core.activation import activate_payload
from core.api import ActivationResponse, FlowPayload, ValidationResponse
from flowgraph.preprocess import FlowPayloadError
from flowgraph.validator import validate_payload

load_dotenv()

logger = logging.getLogger(__name__)

app = FastAPI(title="Chatbot Flow Validator API")


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse(url="/docs")


@app.post("/validate", response_model=ValidationResponse)
def validate(body: FlowPayload) -> Dict[str, Any]:
    try:
        report = validate_payload(body.model_dump())
    except FlowPayloadError as e:
        logger.warning(f"Rejected flow payload: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return report.to_dict()


@app.post("/activate", response_model=ActivationResponse)
def activate(body: FlowPayload) -> Any:
    try:
        result = activate_payload(body.model_dump())
    except FlowPayloadError as e:
        logger.warning(f"Rejected flow payload: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    if not result.activated:
        return JSONResponse(status_code=422, content=result.to_dict())
    return result.to_dict()


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True}
