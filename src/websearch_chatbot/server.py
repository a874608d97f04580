"""FastAPI boundary: ``POST /chat`` relays a thread's message to the agent."""

from __future__ import annotations

from typing import Protocol

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from websearch_chatbot.errors import MissingField, UpstreamApiError

MISSING_FIELDS_ERROR = "message and threadId are required"
UPSTREAM_ERROR = "upstream completion service failed"


class ChatAgent(Protocol):
    async def chat(self, user_message: str, session_id: str) -> str: ...


class ChatRequest(BaseModel):
    # Browser clients send Date.now() as the thread id.
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    message: str | None = None
    thread_id: str | None = Field(default=None, alias="threadId")

    def require_fields(self) -> tuple[str, str]:
        missing = [
            name
            for name, value in (("message", self.message), ("threadId", self.thread_id))
            if not value
        ]
        if missing:
            raise MissingField(missing)
        return self.message, self.thread_id


class ChatResponse(BaseModel):
    message: str


def create_app(agent: ChatAgent) -> FastAPI:
    app = FastAPI(title="Web Search Chatbot", version="0.1.0")

    # The static front end is served from a different origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MissingField)
    async def _missing_field(request: Request, exc: MissingField) -> JSONResponse:
        logger.info(f"Rejected {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_ERROR})

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(f"Rejected {request.url.path}: malformed body")
        return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_ERROR})

    @app.exception_handler(UpstreamApiError)
    async def _upstream_failed(request: Request, exc: UpstreamApiError) -> JSONResponse:
        logger.error(f"Upstream failure on {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"error": UPSTREAM_ERROR})

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "Hello World!"

    @app.post("/chat", response_model=ChatResponse)
    async def chat(req: ChatRequest) -> ChatResponse:
        message, thread_id = req.require_fields()
        reply = await agent.chat(message, thread_id)
        return ChatResponse(message=reply)

    return app
