"""
DFA Simulator API

FastAPI-based REST API exposing the simulator core: parsing, validation,
simulation, string generation, editing, batch runs and exports.

Security features:
  - Input sanitization (max length, control character stripping)
  - Rate limiting via slowapi (RATE_LIMIT env var, default 60/minute)
  - Optional API key authentication (set API_KEY env var to enable)
"""

import os
import re
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, Field, field_validator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import Response

from dfa_sim import __version__
from dfa_sim.core import (
    DEFAULT_DFA,
    DFA,
    Edit,
    EditError,
    FormatError,
    StringOracle,
    apply_edit,
    parse_dfa,
    run_batch,
    shortest_path,
    simulate,
    to_csv,
    to_dot,
    to_json,
    to_text,
    validate_dfa,
)
from dfa_sim.core.logging_config import setup_logging

log = structlog.get_logger()

# --- Rate Limiter ---
RATE_LIMIT = os.environ.get("RATE_LIMIT", "60/minute")
limiter = Limiter(key_func=get_remote_address)

# --- API Key Auth (optional) ---
API_KEY = os.environ.get("API_KEY")  # Set to enable auth; unset = disabled
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)):
    """Validate API key if API_KEY env var is set. No-op when unset."""
    if API_KEY is None:
        return
    if api_key != API_KEY:
        raise HTTPException(
            status_code=401,
            detail={
                "error": "Invalid or missing API key",
                "error_type": "AuthenticationError",
                "hint": "Provide a valid X-API-Key header."
            }
        )


# --- Lifespan Management ---

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    app.state.oracle = StringOracle()
    log.info("api_started", version=__version__)
    yield
    log.info("api_stopped")


app = FastAPI(
    title="DFA Simulator API",
    version=__version__,
    description="Parse, validate, simulate and probe deterministic finite automata",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# --- CORS Configuration ---
ALLOWED_ORIGINS = os.environ.get(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000"
).split(",")

if os.environ.get("ENVIRONMENT") == "development":
    ALLOWED_ORIGINS = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Input Sanitization Constants ---
MAX_DEFINITION_LENGTH = 20000
MAX_INPUT_LENGTH = 10000
MAX_BATCH_SIZE = 1000
_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


# --- Request/Response Models ---

class DefinitionRequest(BaseModel):
    text: str

    @field_validator("text", mode="before")
    @classmethod
    def sanitize_text(cls, v: str) -> str:
        if not isinstance(v, str):
            raise ValueError("Definition must be a string.")
        v = v.strip()
        if not v:
            raise ValueError("Definition cannot be empty.")
        if len(v) > MAX_DEFINITION_LENGTH:
            raise ValueError(f"Definition exceeds maximum length of {MAX_DEFINITION_LENGTH} characters.")
        return _CONTROL_CHAR_RE.sub("", v)


class DFARequest(BaseModel):
    dfa: DFA


class SimulateRequest(BaseModel):
    dfa: DFA
    input: str = Field(default="", max_length=MAX_INPUT_LENGTH)


class PathRequest(BaseModel):
    dfa: DFA
    start: str
    target: str


class EditRequest(BaseModel):
    dfa: DFA
    edit: Edit


class BatchRequest(BaseModel):
    dfa: DFA
    inputs: List[str] = Field(default_factory=list, max_length=MAX_BATCH_SIZE)


class HealthResponse(BaseModel):
    status: str
    message: str
    version: str = __version__


# --- Helper Functions ---

def get_oracle(request: Request) -> StringOracle:
    """The oracle created at startup, or a fresh one when the lifespan did not run."""
    oracle = getattr(request.app.state, "oracle", None)
    if oracle is None:
        oracle = StringOracle()
        request.app.state.oracle = oracle
    return oracle


def require_valid(dfa: DFA) -> None:
    """Reject structurally invalid automata before they reach the simulator."""
    violations = validate_dfa(dfa)
    if violations:
        raise HTTPException(
            status_code=400,
            detail={
                "error": violations[0].message,
                "error_type": "ValidationError",
                "violations": [v.model_dump(mode="json") for v in violations],
                "hint": "Call /validate and fix every violation first."
            }
        )


def attachment(content: str, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# --- API Endpoints ---

@app.get("/health", response_model=HealthResponse)
@limiter.limit(RATE_LIMIT)
async def health_check(request: Request):
    """Health check endpoint to verify API is running."""
    return HealthResponse(status="healthy", message="DFA Simulator API is running")


@app.get("/default")
@limiter.limit(RATE_LIMIT)
async def default_dfa(request: Request):
    """The starting automaton shipped with the simulator."""
    return {"dfa": DEFAULT_DFA.to_dict(), "text": to_text(DEFAULT_DFA)}


@app.post("/parse", dependencies=[Depends(verify_api_key)])
@limiter.limit(RATE_LIMIT)
async def parse_definition(request: Request, body: DefinitionRequest):
    """
    Parse a text definition into a DFA.

    Returns:
        - 200: DFA parsed and validated
        - 400: Format or validation error (message names the offending construct)
        - 401: Unauthorized (invalid API key)
        - 422: Malformed request body
    """
    request_id = str(uuid.uuid4())[:8]
    t_start = time.time()
    try:
        dfa = parse_dfa(body.text)
    except FormatError as e:
        log.info("parse_failed", request_id=request_id, error=str(e))
        raise HTTPException(
            status_code=400,
            detail={
                "error": str(e),
                "error_type": "FormatError",
                "hint": "Expected sections: Alfabeto, Estados, Estado inicial, Estado(s) aceitador(es), Transições (last)."
            }
        )
    except Exception as e:
        log.error("parse_crashed", request_id=request_id, error=str(e), traceback=traceback.format_exc())
        raise HTTPException(
            status_code=500,
            detail={
                "error": f"Internal server error: {str(e)}",
                "error_type": "RuntimeError",
                "hint": "An unexpected error occurred. Check server logs for details."
            }
        )

    total_ms = round((time.time() - t_start) * 1000, 1)
    log.info("parse_succeeded", request_id=request_id, states=len(dfa.states), ms=total_ms)
    return {"dfa": dfa.to_dict(), "performance": {"total_ms": total_ms}}


@app.post("/validate")
@limiter.limit(RATE_LIMIT)
async def validate_definition(request: Request, body: DFARequest):
    violations = validate_dfa(body.dfa)
    return {
        "valid": not violations,
        "violations": [v.model_dump(mode="json") for v in violations],
    }


@app.post("/simulate")
@limiter.limit(RATE_LIMIT)
async def simulate_input(request: Request, body: SimulateRequest):
    """Full trace of one input; the client replays it step by step."""
    require_valid(body.dfa)
    result = simulate(body.dfa, body.input)
    return {"input": body.input, **result.to_dict(), "finalState": result.final_state}


@app.post("/generate/accepted")
@limiter.limit(RATE_LIMIT)
async def generate_accepted_string(request: Request, body: DFARequest):
    require_valid(body.dfa)
    value = get_oracle(request).generate_accepted(body.dfa)
    return {"string": value, "found": bool(value) or body.dfa.is_accepting(body.dfa.initial_state)}


@app.post("/generate/rejected")
@limiter.limit(RATE_LIMIT)
async def generate_rejected_string(request: Request, body: DFARequest):
    require_valid(body.dfa)
    return {"string": get_oracle(request).generate_rejected(body.dfa)}


@app.post("/shortest-path")
@limiter.limit(RATE_LIMIT)
async def find_shortest_path(request: Request, body: PathRequest):
    require_valid(body.dfa)
    for state in (body.start, body.target):
        if state not in body.dfa.states:
            raise HTTPException(
                status_code=400,
                detail={"error": f"Unknown state '{state}'", "error_type": "ValidationError"}
            )
    path = shortest_path(body.dfa, body.start, body.target)
    return {"path": path, "found": bool(path) or body.start == body.target}


@app.post("/edit", dependencies=[Depends(verify_api_key)])
@limiter.limit(RATE_LIMIT)
async def edit_dfa(request: Request, body: EditRequest):
    """Apply one edit; the returned DFA supersedes the submitted one."""
    try:
        updated = apply_edit(body.dfa, body.edit)
    except EditError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": str(e),
                "error_type": "EditError",
                "hint": "The edit was not applied; the submitted DFA is unchanged."
            }
        )
    return {"dfa": updated.to_dict()}


@app.post("/batch")
@limiter.limit(RATE_LIMIT)
async def batch_simulate(request: Request, body: BatchRequest):
    require_valid(body.dfa)
    report = run_batch(body.dfa, body.inputs)
    return {
        "results": [e.model_dump() for e in report.entries],
        "summary": report.summary.to_dict(),
        "acceptance": report.acceptance_label(),
    }


# --- Export Endpoints ---

@app.post("/export/json")
@limiter.limit(RATE_LIMIT)
async def export_json(request: Request, body: DFARequest):
    return attachment(to_json(body.dfa), "application/json", "dfa-definition.json")


@app.post("/export/text")
@limiter.limit(RATE_LIMIT)
async def export_text(request: Request, body: DFARequest):
    return attachment(to_text(body.dfa), "text/plain; charset=utf-8", "dfa-definition.txt")


@app.post("/export/dot")
@limiter.limit(RATE_LIMIT)
async def export_dot(request: Request, body: DFARequest):
    return attachment(to_dot(body.dfa), "text/vnd.graphviz", "dfa-definition.dot")


@app.post("/export/csv")
@limiter.limit(RATE_LIMIT)
async def export_csv(request: Request, body: BatchRequest):
    require_valid(body.dfa)
    return attachment(to_csv(run_batch(body.dfa, body.inputs)), "text/csv", "dfa-test-results.csv")


@app.get("/")
async def root() -> Dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "DFA Simulator API",
        "version": __version__,
        "description": "Deterministic finite automaton simulator",
        "endpoints": {
            "/health": "Health check (GET)",
            "/default": "Default automaton (GET)",
            "/parse": "Parse a text definition (POST)",
            "/validate": "List structural violations (POST)",
            "/simulate": "Simulate one input (POST)",
            "/generate/accepted": "Generate an accepted string (POST)",
            "/generate/rejected": "Generate a rejected string (POST)",
            "/shortest-path": "Shortest input between two states (POST)",
            "/edit": "Apply one edit (POST)",
            "/batch": "Simulate many inputs (POST)",
            "/export/json": "Export DFA as JSON file (POST)",
            "/export/text": "Export DFA as text definition (POST)",
            "/export/dot": "Export DFA as Graphviz DOT file (POST)",
            "/export/csv": "Export batch results as CSV (POST)"
        }
    }


if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "8000"))
    uvicorn.run("dfa_sim.api:app", host=host, port=port)
