"""
Activity DNA: Compute API Server
================================

Thin HTTP surface over ActivityEngine. Every endpoint is a pure
computation over the request body; nothing is stored.

Endpoints:
- GET  /health
- GET  /api/v1/diagnostics     -> Diagnostics collected so far
- POST /api/v1/encode          -> Wire text
- POST /api/v1/decode          -> Decoded record
- POST /api/v1/analyze/batch   -> Batch report
- POST /api/v1/analyze/event   -> Per-event analytics
- POST /api/v1/predict         -> Next-activity prediction
- POST /api/v1/temporal        -> Temporal statistics
- POST /api/v1/sanitize        -> Redacted wire text
- POST /api/v1/inject          -> Enriched wire text

Usage:
    uvicorn activity_dna.api.server:app --reload
"""
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..contracts.base import CURRENT_VERSION, ErrorCode, Result
from ..domain.serialization import to_jsonable
from ..config import EngineConfig
from ..engine import ActivityEngine
from ..facade import BatchOptions
from ..observability import DiagnosticsCollector
from ..transforms.injector import InjectionOptions


# =============================================================================
# REQUEST MODELS
# =============================================================================

class EncodeRequest(BaseModel):
    activity: Any
    value: Any = None
    context: Any = None
    version: Optional[str] = CURRENT_VERSION
    timestamp: Optional[int] = None


class TextRequest(BaseModel):
    text: Any


class EventsRequest(BaseModel):
    events: List[Any]
    lookback: Optional[int] = None


class BatchRequest(BaseModel):
    events: List[Any]
    max_events: Optional[int] = None
    lookback: Optional[int] = None


class SanitizeRequest(BaseModel):
    text: Any
    sensitive_keys: Optional[List[str]] = None


class InjectRequest(BaseModel):
    text: Any
    additional: Dict[str, Any] = Field(default_factory=dict)
    source: Optional[str] = None


# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

_STATUS_FOR = {
    ErrorCode.EXCEEDED_LIMIT: 413,
}


def get_engine(request: Request) -> ActivityEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine


def _respond(result: Result, key: Optional[str] = None) -> JSONResponse:
    """Map a Result to a JSON response; failures carry their stable code."""
    if result.is_failure:
        status = _STATUS_FOR.get(result.error.code, 422)
        return JSONResponse(status_code=status, content={"error": result.error.to_dict()})
    payload = to_jsonable(result.value)
    return JSONResponse(content={key: payload} if key else payload)


def create_app(engine: Optional[ActivityEngine] = None) -> FastAPI:
    """
    Build the API. Without an explicit engine one is created at startup
    from ACTIVITY_DNA_* environment variables.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "engine", None) is None:
            config = EngineConfig.from_env()
            app.state.engine = ActivityEngine(
                config=config,
                diagnostics=DiagnosticsCollector("api", max_entries=config.diagnostics_capacity)
            )
            print(f"[*] Activity engine initialized (format {CURRENT_VERSION}).")
        yield
        print("[*] Shutting down activity engine.")

    app = FastAPI(
        title="Activity DNA API",
        version=__version__,
        description="Stateless codec and analytics for activity records",
        lifespan=lifespan
    )
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # =========================================================================
    # ENDPOINTS
    # =========================================================================

    @app.get("/health")
    async def health_check(engine: ActivityEngine = Depends(get_engine)):
        """System status."""
        return {"status": "online", "format_version": CURRENT_VERSION}

    @app.get("/api/v1/diagnostics")
    async def get_diagnostics(engine: ActivityEngine = Depends(get_engine)):
        sink = engine.diagnostics
        if not isinstance(sink, DiagnosticsCollector):
            return {"entries": []}
        return {"entries": [d.to_dict() for d in sink.get_entries()]}

    @app.post("/api/v1/encode")
    async def encode(body: EncodeRequest, engine: ActivityEngine = Depends(get_engine)):
        result = engine.encode(
            body.activity, body.value, body.context, body.version,
            timestamp=body.timestamp
        )
        return _respond(result, "encoded")

    @app.post("/api/v1/decode")
    async def decode(body: TextRequest, engine: ActivityEngine = Depends(get_engine)):
        return _respond(engine.decode(body.text))

    @app.post("/api/v1/analyze/batch")
    async def analyze_batch(body: BatchRequest, engine: ActivityEngine = Depends(get_engine)):
        options = BatchOptions(max_events=body.max_events, lookback=body.lookback)
        return _respond(engine.analyze_batch(body.events, options))

    @app.post("/api/v1/analyze/event")
    async def analyze_event(body: TextRequest, engine: ActivityEngine = Depends(get_engine)):
        return _respond(engine.event_analytics(body.text))

    @app.post("/api/v1/predict")
    async def predict(body: EventsRequest, engine: ActivityEngine = Depends(get_engine)):
        return to_jsonable(engine.predict_next(body.events, body.lookback))

    @app.post("/api/v1/temporal")
    async def temporal(body: EventsRequest, engine: ActivityEngine = Depends(get_engine)):
        return {"temporal": to_jsonable(engine.temporal(body.events))}

    @app.post("/api/v1/sanitize")
    async def sanitize(body: SanitizeRequest, engine: ActivityEngine = Depends(get_engine)):
        return _respond(engine.sanitize(body.text, body.sensitive_keys), "encoded")

    @app.post("/api/v1/inject")
    async def inject(body: InjectRequest, engine: ActivityEngine = Depends(get_engine)):
        result = engine.inject_context(
            body.text, body.additional, InjectionOptions(source=body.source)
        )
        return _respond(result, "encoded")

    return app


app = create_app()
