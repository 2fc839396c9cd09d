"""
Picky Joy Web API - FastAPI application.

Uses Supabase Auth bearer tokens for authentication. Every response carries
permissive CORS headers and OPTIONS on any path answers 200 directly.
"""

import json
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from picky_joy import __version__
from picky_joy.config import get_settings
from picky_joy.conversation.handler import ConversationHandler
from picky_joy.errors import PickyJoyError
from picky_joy.web.dependencies import get_conversation_handler
from picky_joy.web.history_routes import router as history_router
from picky_joy.web.profile_routes import router as profile_router
from picky_joy.web.recipe_routes import router as recipe_router
from picky_joy.web.settings_routes import router as settings_router

logger = logging.getLogger(__name__)

BASE_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
}


def cors_headers() -> dict[str, str]:
    """Permissive CORS headers; pre-flight cache lifetime comes from CORS_MAX_AGE."""
    return {**BASE_CORS_HEADERS, "Access-Control-Max-Age": str(get_settings().cors_max_age)}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup."""
    from picky_joy.llm.prompt_logger import enable_prompt_logging, is_enabled

    settings = get_settings()
    if settings.picky_log_prompts:
        enable_prompt_logging(True)
    missing = settings.missing_chat_settings()
    logger.info("Picky Joy starting up...")
    logger.info(f"  Environment: {settings.picky_env}")
    logger.info(f"  Prompt file logging: {is_enabled()}")
    if missing:
        logger.warning(f"  Chat disabled until configured, missing: {', '.join(missing)}")
    yield


app = FastAPI(title="Picky Joy", version=__version__, lifespan=lifespan)


@app.middleware("http")
async def apply_cors(request: Request, call_next):
    """Answer pre-flight on every route and stamp CORS headers on all responses."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=cors_headers())

    response = await call_next(request)
    for name, value in cors_headers().items():
        response.headers[name] = value
    return response


# =============================================================================
# Error rendering
# =============================================================================


@app.exception_handler(PickyJoyError)
async def picky_joy_error_handler(request: Request, exc: PickyJoyError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"}, headers=cors_headers())


app.include_router(profile_router, prefix="/api")
app.include_router(settings_router, prefix="/api")
app.include_router(history_router, prefix="/api")
app.include_router(recipe_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    missing = get_settings().missing_chat_settings()
    return {
        "status": "healthy",
        "version": __version__,
        "configured": not missing,
    }


# =============================================================================
# Chat Endpoint
# =============================================================================


async def _read_json_body(request: Request) -> dict | None:
    """Parsed JSON object body, or None. Validation is the handler's job."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


@app.post("/api/chat")
@app.post("/.netlify/functions/chat")
async def chat(
    request: Request,
    authorization: str | None = Header(None),
    handler: ConversationHandler = Depends(get_conversation_handler),
):
    """Send a message to Picky Joy and get the assistant's reply."""
    payload = await _read_json_body(request)
    reply = await handler.handle(authorization, payload)
    return {"message": reply.message}

