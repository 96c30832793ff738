"""FastAPI backend for the chat-styled assessment."""

from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Any, Literal

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from langgraph.types import Command
from pydantic import BaseModel, Field, StrictFloat, StrictStr

from src.catalog.questions import get_catalog
from src.logging_config import setup_logging
from src.models.initial_state import new_session_state
from src.workflow import build_graph

load_dotenv()
setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title="Assessment Profile Engine", version="0.3.0")
graph = build_graph()
MAX_MESSAGE_CHARS = 4000


# ── Request logging middleware ────────────────────────────────────────────

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with method, path, and response time."""
    request_id = uuid.uuid4().hex[:8]
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %s (%.0fms) [rid=%s]",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        request_id,
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ── Health check ──────────────────────────────────────────────────────────

@app.get("/health")
def health_check() -> JSONResponse:
    """Lightweight health check for deployment platforms."""
    return JSONResponse({"status": "ok"})


class RespondRequest(BaseModel):
    session_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9_-]+$",
    )
    action: Literal["answer", "toggle", "back"] = "answer"
    # Strict so booleans are rejected rather than coerced to 1.0.
    value: StrictStr | StrictFloat | list[StrictStr] | None = None
    option: str | None = None


class QuestionPayload(BaseModel):
    id: str
    prompt: str
    kind: str
    options: list[str] = []
    scale: list[float] | None = None


class MessageResponse(BaseModel):
    session_id: str
    ai_message: str
    status: str
    question: QuestionPayload | None = None
    pending_selection: list[str] = []
    can_go_back: bool = False
    error: str | None = None
    profile: dict[str, Any] | None = None
    guidance: str | None = None


def _extract_response(result: dict[str, Any], session_id: str) -> MessageResponse:
    """Build API response from graph state."""
    messages = result.get("messages", [])
    last_ai = next((m.content for m in reversed(messages) if m.type == "ai"), "")

    is_complete = bool(result.get("done"))
    conversation = result.get("conversation", {})
    question_id = conversation.get("current_question_id")
    question = None
    if question_id and not is_complete:
        question = QuestionPayload(**get_catalog().get(question_id).to_dict())

    history = conversation.get("history", [])
    return MessageResponse(
        session_id=session_id,
        ai_message=last_ai,
        status="complete" if is_complete else "in-progress",
        question=question,
        pending_selection=conversation.get("pending_selection", []),
        can_go_back=not is_complete and len(history) > 1,
        error=result.get("last_error") or None,
        profile=result.get("profile") if is_complete else None,
        guidance=result.get("guidance") if is_complete else None,
    )


@app.post("/api/start", response_model=MessageResponse)
def start_session() -> MessageResponse:
    """Start a new assessment session."""
    session_id = str(uuid.uuid4())[:8]
    config = {"configurable": {"thread_id": session_id}}

    result = graph.invoke(new_session_state(session_id=session_id), config)
    return _extract_response(result, session_id)


@app.post("/api/respond", response_model=MessageResponse)
def respond(req: RespondRequest) -> MessageResponse:
    """Send one user action (answer / toggle / back) and return the next state."""
    payload: dict[str, Any] = {"action": req.action}
    # An answer without a value submits the pending multi-select toggles.
    if req.action == "answer" and req.value is not None:
        value = req.value.strip() if isinstance(req.value, str) else req.value
        if value == "" or value == []:
            raise HTTPException(status_code=400, detail="Answer cannot be empty.")
        if isinstance(value, str) and len(value) > MAX_MESSAGE_CHARS:
            raise HTTPException(
                status_code=400,
                detail=f"Answer too long. Maximum length is {MAX_MESSAGE_CHARS} characters.",
            )
        payload["value"] = value
    elif req.action == "toggle":
        if not req.option:
            raise HTTPException(status_code=400, detail="Option cannot be empty.")
        payload["option"] = req.option

    config = {"configurable": {"thread_id": req.session_id}}

    try:
        result = graph.invoke(Command(resume=payload), config)
    except Exception:
        logger.exception("Failed to resume session %s", req.session_id)
        raise HTTPException(
            status_code=400,
            detail="Unable to continue this session. Start a new session and try again.",
        ) from None

    return _extract_response(result, req.session_id)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    print(f"Starting web interface on http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
