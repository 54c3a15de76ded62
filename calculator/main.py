"""
FastAPI entrypoint for the Web Calculator.
"""
import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import List, Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .config import (
    LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT, SLOW_REQUEST_THRESHOLD_MS,
    MAX_SESSIONS, HISTORY_LIMIT, SESSION_RATE_LIMIT, KEY_RATE_LIMIT,
)
from .sessions import CalculatorSession, SessionStore

# Attributes present on every LogRecord, excluded from the JSON extras dict
_LOG_RECORD_BUILTIN_ATTRS = {
    'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno', 'message', 'module',
    'msecs', 'msg', 'name', 'pathname', 'process', 'processName',
    'relativeCreated', 'stack_info', 'thread', 'threadName', 'taskName',
}


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON for machine-readable file output."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        # Merge any extra={} fields passed by the caller
        for key, val in record.__dict__.items():
            if key not in _LOG_RECORD_BUILTIN_ATTRS and key not in entry:
                entry[key] = val
        return json.dumps(entry, default=str)


# Console handler, human-readable
_console_handler = logging.StreamHandler()
_console_handler.setFormatter(
    logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
)

# File handler, JSON lines rotated at LOG_MAX_BYTES
_file_handler = RotatingFileHandler(
    LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding='utf-8'
)
_file_handler.setFormatter(JSONFormatter())

logging.basicConfig(level=logging.INFO, handlers=[_console_handler, _file_handler])
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(key_func=get_remote_address)


# Request/Response models
class DigitRequest(BaseModel):
    """Request model for digit entry."""
    token: str = Field(..., pattern=r"^[0-9.]$", description="A digit 0-9 or the decimal point")


class OperatorRequest(BaseModel):
    """Request model for choosing an operator."""
    operator: str = Field(..., min_length=1, max_length=1, description="One of + - × ÷ (or * and /)")


class ActionRequest(BaseModel):
    """Request model for button actions."""
    action: str = Field(..., description="clear, delete, decimal, percentage or equals")


class KeyRequest(BaseModel):
    """Request model for keyboard input."""
    key: str = Field(..., min_length=1, max_length=20, description="Key name as reported by the browser")


class DisplayResponse(BaseModel):
    """Display state returned after every command."""
    session_id: str
    current: str
    previous: str
    operator: Optional[str]
    error: Optional[str] = None
    notice: Optional[str] = None


class KeyResponse(DisplayResponse):
    """Display state plus whether the key was bound to a command."""
    handled: bool


class HistoryItem(BaseModel):
    """A history entry ready for display."""
    expression: str
    result: str
    timestamp: str


class HistoryResponse(BaseModel):
    """Response model for the history listing."""
    session_id: str
    entries: List[HistoryItem]
    notice: Optional[str] = None


class ClipboardResponse(BaseModel):
    """Text for the browser to place on the clipboard."""
    text: str
    notice: Optional[str] = None


class ThemeResponse(BaseModel):
    """Current theme of a session."""
    theme: str


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    active_sessions: int


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_session(session_id: str, sessions: SessionStore = Depends(get_sessions)) -> CalculatorSession:
    """Resolve the session named in the path or respond 404."""
    try:
        return sessions.get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


def display_response(session: CalculatorSession) -> DisplayResponse:
    state = session.display()
    error, notice = session.drain_messages()
    return DisplayResponse(
        session_id=session.session_id,
        current=state.current,
        previous=state.previous,
        operator=state.operator,
        error=error,
        notice=notice,
    )


router = APIRouter()


# Endpoints
@router.get("/health", response_model=HealthResponse)
async def health_check(sessions: SessionStore = Depends(get_sessions)):
    """
    Health check endpoint.
    """
    return HealthResponse(status="healthy", active_sessions=len(sessions))


@router.post("/sessions", response_model=DisplayResponse, status_code=201)
@limiter.limit(SESSION_RATE_LIMIT)
async def create_session(request: Request, sessions: SessionStore = Depends(get_sessions)):
    """
    Start a new calculator session.
    """
    session = sessions.create()
    return display_response(session)


@router.get("/sessions/{session_id}", response_model=DisplayResponse)
async def read_display(session: CalculatorSession = Depends(get_session)):
    """Current display of a session."""
    return display_response(session)


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, sessions: SessionStore = Depends(get_sessions)):
    """
    End a calculator session.
    """
    if not sessions.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"message": f"Session {session_id} deleted"}


@router.post("/sessions/{session_id}/digit", response_model=DisplayResponse)
async def digit_endpoint(body: DigitRequest, session: CalculatorSession = Depends(get_session)):
    """Append a digit or decimal point."""
    session.press_digit(body.token)
    return display_response(session)


@router.post("/sessions/{session_id}/operator", response_model=DisplayResponse)
async def operator_endpoint(body: OperatorRequest, session: CalculatorSession = Depends(get_session)):
    """
    Choose an operator.

    A pending operation is computed first, so operators chain left to right.
    """
    try:
        session.choose_operator(body.operator)
    except ValueError as e:
        logger.warning(f"[{session.session_id}] Rejected operator: {e}",
                       extra={"session_id": session.session_id})
        raise HTTPException(status_code=400, detail=str(e))
    return display_response(session)


@router.post("/sessions/{session_id}/action", response_model=DisplayResponse)
async def action_endpoint(body: ActionRequest, session: CalculatorSession = Depends(get_session)):
    """
    Run a button action: clear, delete, decimal, percentage or equals.
    """
    try:
        session.run_action(body.action)
    except ValueError as e:
        logger.warning(f"[{session.session_id}] Rejected action: {e}",
                       extra={"session_id": session.session_id})
        raise HTTPException(status_code=400, detail=str(e))
    return display_response(session)


@router.post("/sessions/{session_id}/key", response_model=KeyResponse)
@limiter.limit(KEY_RATE_LIMIT)
async def key_endpoint(request: Request, body: KeyRequest, session: CalculatorSession = Depends(get_session)):
    """
    Handle a keyboard key.

    Unbound keys leave the calculator unchanged and report handled=false.
    """
    handled = session.press_key(body.key)
    display = display_response(session)
    return KeyResponse(handled=handled, **display.model_dump())


@router.get("/sessions/{session_id}/history", response_model=HistoryResponse)
async def history_endpoint(session: CalculatorSession = Depends(get_session)):
    """
    List recent calculations, newest first.
    """
    return HistoryResponse(
        session_id=session.session_id,
        entries=[HistoryItem(**item) for item in session.history_view()],
    )


@router.delete("/sessions/{session_id}/history", response_model=HistoryResponse)
async def clear_history_endpoint(session: CalculatorSession = Depends(get_session)):
    """
    Clear the calculation history.
    """
    session.clear_history()
    _, notice = session.drain_messages()
    logger.info(f"[{session.session_id}] Cleared history",
                extra={"session_id": session.session_id})
    return HistoryResponse(session_id=session.session_id, entries=[], notice=notice)


@router.post("/sessions/{session_id}/history/{index}/load", response_model=DisplayResponse)
async def load_history_endpoint(index: int, session: CalculatorSession = Depends(get_session)):
    """
    Load a history result into the display for reuse.
    """
    try:
        session.reuse_history(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return display_response(session)


@router.post("/sessions/{session_id}/clipboard", response_model=ClipboardResponse)
async def clipboard_endpoint(session: CalculatorSession = Depends(get_session)):
    """
    Text of the current operand for the browser to copy.
    """
    text = session.copy_text()
    _, notice = session.drain_messages()
    return ClipboardResponse(text=text, notice=notice)


@router.get("/sessions/{session_id}/theme", response_model=ThemeResponse)
async def theme_endpoint(session: CalculatorSession = Depends(get_session)):
    """Current theme."""
    return ThemeResponse(theme=session.theme.theme)


@router.post("/sessions/{session_id}/theme/toggle", response_model=ThemeResponse)
async def toggle_theme_endpoint(session: CalculatorSession = Depends(get_session)):
    """Switch between light and dark theme."""
    return ThemeResponse(theme=session.toggle_theme())


def create_app(
    max_sessions: int = MAX_SESSIONS,
    history_limit: int = HISTORY_LIMIT
) -> FastAPI:
    """
    Build the FastAPI application with its own session store.

    Args:
        max_sessions: Maximum number of concurrent calculator sessions
        history_limit: History entries kept per session

    Returns:
        Configured FastAPI app
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan event handler for startup and shutdown."""
        logger.info(f"Starting Web Calculator (max {max_sessions} sessions)")
        yield
        logger.info(f"Stopping Web Calculator with {len(app.state.sessions)} active sessions")

    app = FastAPI(
        title="Web Calculator",
        description="Calculator engine with history, served to a browser front end",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.sessions = SessionStore(max_sessions=max_sessions, history_limit=history_limit)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every HTTP request with method, path, status code, and duration."""
        start_time = time.time()
        response = await call_next(request)
        duration_ms = round((time.time() - start_time) * 1000, 2)
        extra = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        message = f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)"
        if duration_ms > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(f"Slow request: {message}", extra=extra)
        else:
            logger.info(message, extra=extra)
        return response

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
