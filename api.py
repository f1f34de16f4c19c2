"""
Automaton Engine API

FastAPI-based REST API exposing the automaton engine.
Stateless: every request carries its own automaton record.

Security features:
  - Rate limiting via slowapi (30 req/min on engine endpoints)
  - Optional API key authentication (set API_KEY env var to enable)
  - Input length limit on simulated strings
"""

import os
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from automaton_engine import (
    AutomatonError,
    AutomatonRecord,
    from_record,
    get_execution_trace,
    get_orphaned_states,
    get_validation_report,
    is_accepted,
    is_runnable,
    run_simulation,
)
from automaton_engine.logging_config import get_logger, setup_logging

API_VERSION = "1.0.0"

log = get_logger(__name__)

# --- Rate Limiter ---
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


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    log.info("api_started", version=API_VERSION, auth_enabled=API_KEY is not None)
    yield
    log.info("api_stopped")


app = FastAPI(
    title="Automaton Engine API",
    version=API_VERSION,
    description="Validate and simulate deterministic finite automata",
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

MAX_INPUT_LENGTH = 10_000


# --- Request/Response Models ---

class SimulateRequest(BaseModel):
    automaton: AutomatonRecord
    input: str = Field(default="", max_length=MAX_INPUT_LENGTH)


class HealthResponse(BaseModel):
    status: str
    message: str
    version: str = API_VERSION


def load_automaton(record: AutomatonRecord):
    """Convert a record through the builder; structural problems become 400."""
    try:
        return from_record(record)
    except AutomatonError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": str(e),
                "error_type": "StructuralError",
                "hint": "Check state references, symbols and duplicate (from, symbol) pairs."
            }
        )


# --- API Endpoints ---

@app.get("/health", response_model=HealthResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Health check endpoint to verify API is running."""
    return HealthResponse(status="healthy", message="Automaton Engine API is running")


@app.post("/validate", dependencies=[Depends(verify_api_key)])
@limiter.limit("30/minute")
async def validate_automaton(request: Request, record: AutomatonRecord):
    """
    Validate an automaton record.

    Returns:
        - 200: report (valid, errors, warnings) plus runnable flag and orphaned states
        - 400: record violates structural invariants
        - 401: Unauthorized (invalid API key)
        - 422: malformed request body
    """
    request_id = str(uuid.uuid4())[:8]
    automaton = load_automaton(record)
    report = get_validation_report(automaton)
    log.info("validate_request", request_id=request_id, valid=report.valid, states=len(automaton.states))

    return {
        **report.model_dump(),
        "runnable": is_runnable(automaton),
        "orphaned_states": sorted(get_orphaned_states(automaton)),
    }


@app.post("/simulate", dependencies=[Depends(verify_api_key)])
@limiter.limit("30/minute")
async def simulate(request: Request, query: SimulateRequest):
    """
    Run a runnable DFA on an input string.

    Returns:
        - 200: accepted flag, final state, step records and readable trace
        - 400: structural error, automaton not runnable, or symbol outside alphabet
        - 401: Unauthorized (invalid API key)
        - 422: malformed request body
        - 500: Internal server error
    """
    request_id = str(uuid.uuid4())[:8]
    t_start = time.time()
    automaton = load_automaton(query.automaton)

    try:
        simulation = run_simulation(automaton, query.input)
    except AutomatonError as e:
        log.warning("simulation_rejected", request_id=request_id, error=str(e))
        raise HTTPException(
            status_code=400,
            detail={
                "error": str(e),
                "error_type": "SimulationError",
                "hint": "POST the automaton to /validate to see why it cannot run."
            }
        )
    except Exception as e:
        log.error("simulation_failed", request_id=request_id, error=str(e), tb=traceback.format_exc())
        raise HTTPException(
            status_code=500,
            detail={
                "error": f"Internal server error: {str(e)}",
                "error_type": "RuntimeError",
                "hint": "An unexpected error occurred. Check server logs for details."
            }
        )

    total_ms = round((time.time() - t_start) * 1000, 1)
    accepted = is_accepted(simulation)
    log.info("simulate_request", request_id=request_id, accepted=accepted, total_ms=total_ms)

    return {
        "accepted": accepted,
        "final_state": next(iter(simulation.current_states)),
        "steps": [s.model_dump() for s in simulation.steps],
        "trace": get_execution_trace(simulation),
        "performance": {"total_ms": total_ms},
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Automaton Engine API",
        "version": API_VERSION,
        "description": "Validate and simulate deterministic finite automata",
        "endpoints": {
            "/health": "Health check (GET)",
            "/validate": "Validation report for an automaton record (POST)",
            "/simulate": "Run a DFA on an input string (POST)"
        }
    }


if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "8000"))
    uvicorn.run("api:app", host=host, port=port)
