"""FastAPI application exposing the chat, clear and explain endpoints.

The app is built by :func:`create_app` from already-constructed services
so tests can pass fakes and the entry point owns client lifecycles.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ttchat.annotation import SentenceAnnotator
from ttchat.exceptions import StoreUnavailable
from ttchat.session import ConversationSession

logger = logging.getLogger(__name__)


# ---------- API Models ----------
class ChatRequest(BaseModel):
    text: str
    convId: str


class ChatResponse(BaseModel):
    prompt: str
    reply: str


class ClearRequest(BaseModel):
    convId: str


class ClearResponse(BaseModel):
    convId: str


class ExplainRequest(BaseModel):
    text: str


class ExplainReply(BaseModel):
    reading: str | None = None
    romaji: str | None = None
    translation: str | None = None


class ExplainResponse(BaseModel):
    prompt: str
    reply: ExplainReply


def create_app(
    session: ConversationSession,
    annotator: SentenceAnnotator,
    model_id: str = "",
) -> FastAPI:
    """Build the HTTP application around the given services.

    Args:
        session: Handles ``/chat`` and ``/clear``.
        annotator: Handles ``/explain``.
        model_id: Reported by ``/healthz``.

    Returns:
        A ready-to-serve :class:`fastapi.FastAPI` instance.
    """
    app = FastAPI(title="ttchat - Japanese conversation practice")

    @app.exception_handler(StoreUnavailable)
    def store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
        logger.error(
            "%s %s failed: store %s unavailable: %s",
            request.method,
            request.url.path,
            exc.operation or "operation",
            exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "model": model_id}

    @app.post("/chat", response_model=ChatResponse)
    def chat(req: ChatRequest):
        result = session.chat(req.convId, req.text)
        return ChatResponse(prompt=result.prompt, reply=result.reply)

    @app.post("/clear", response_model=ClearResponse)
    def clear(req: ClearRequest):
        return ClearResponse(convId=session.clear(req.convId))

    @app.post("/explain", response_model=ExplainResponse, response_model_exclude_none=True)
    def explain(req: ExplainRequest):
        result = annotator.annotate(req.text)
        reply = ExplainReply(
            reading=result.reading,
            romaji=result.romaji,
            translation=result.translation,
        )
        return ExplainResponse(prompt=req.text, reply=reply)

    return app
