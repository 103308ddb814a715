import logging
import os
from typing import Any, List

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from portfolio_chat.core.errors import ChatRelayError, MissingApiKeyError
from portfolio_chat.core.llm_client import call_chat_completion
from portfolio_chat.core.profile import fallback_resume, load_resume
from portfolio_chat.core.prompts import build_messages, format_context
from portfolio_chat.core.sanitize import finalize_reply
from portfolio_chat.settings import Settings, get_settings
from portfolio_chat.utils.logging import configure_logging

configure_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

CORS_ORIGINS = settings.cors_origins


# -----------------------------
# FastAPI
# -----------------------------
app = FastAPI(title="Portfolio Chat Proxy", version="0.1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"]
    if CORS_ORIGINS.strip() == "*"
    else [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ChatRequest(BaseModel):
    prompt: str = ""
    # page text from the widget or a resume object; anything else is treated as no context
    context: Any = ""
    # turns are normalized in build_messages; non-object entries are skipped
    history: List[Any] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str


def _preview(text: str, n: int) -> str:
    return text[:n] + "..."


@app.exception_handler(ChatRelayError)
async def _relay_error_handler(_request: Request, exc: ChatRelayError) -> JSONResponse:
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


# -----------------------------
# Routes
# -----------------------------
@app.get("/api/health")
def health(cfg: Settings = Depends(get_settings)):
    return {"status": "ok", "model": cfg.chat_model}


@app.get("/api/resume")
def get_resume(cfg: Settings = Depends(get_settings)):
    try:
        resume, sources = load_resume(
            cfg.resume_pdf,
            cfg.portfolio_html,
            owner_name=cfg.owner_name,
            owner_summary=cfg.owner_summary,
        )
    except Exception:
        logger.exception("Resume load error")
        return JSONResponse(
            {
                "error": "Failed to load; using fallback",
                "resume": fallback_resume(cfg.owner_name, cfg.owner_summary),
            },
            status_code=500,
        )
    return {**resume, "sources": sources}


@app.post("/api/chat", response_model=ChatResponse)
def chat(req: ChatRequest, cfg: Settings = Depends(get_settings)):
    if not cfg.hf_api_key:
        raise MissingApiKeyError()

    prompt = req.prompt or ""
    if not prompt.strip():
        return JSONResponse({"error": "Prompt required"}, status_code=400)

    try:
        context_text = format_context(req.context, cfg.owner_name)
        request_fields = {
            "prompt_preview": _preview(prompt, 50),
            "context_length": len(context_text),
            "history_length": len(req.history),
        }
        logger.info(
            "Chat request | prompt=%s | context_length=%s | history_length=%s",
            *request_fields.values(),
            extra=request_fields,
        )

        messages = build_messages(
            prompt,
            context_text,
            req.history,
            owner_name=cfg.owner_name,
            history_limit=cfg.history_limit,
        )
        reply = finalize_reply(call_chat_completion(messages, settings=cfg))
    except ChatRelayError:
        raise
    except Exception as exc:
        logger.exception("Chat error")
        return JSONResponse({"error": str(exc)}, status_code=500)

    reply_preview = _preview(reply, 100)
    logger.info("Reply preview: %s", reply_preview, extra={"reply_preview": reply_preview})
    return ChatResponse(reply=reply)


# the static site is mounted last so /api routes win
if settings.serve_static and os.path.isdir(settings.static_dir):
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="site")


def main() -> None:
    logger.info("Portfolio chat proxy running on http://localhost:%s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
