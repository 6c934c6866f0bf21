"""
Formula Service -- HTTP surface for the two completion formulas.

Endpoints:
1. POST /formulas/completion       -- Completion(prompt, model?, numTokens?, temperature?, stop?)
2. POST /formulas/chat_completion  -- ChatCompletion(prompt, systemPrompt?, model?, ...)
3. GET  /health
4. GET  /metrics

A caller may send its own `Authorization: Bearer <key>`; when the HTTP
transport is active that key is used for the one outbound call instead of
the service key.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse

from shared.llm_adapter import (
    ChatCompletionParams,
    CompletionDispatcher,
    CompletionParams,
    InvalidModelForChat,
    MissingAPIKey,
    ModelCatalog,
    QuotaExceeded,
    StatusCodeError,
    get_transport,
)
from shared.llm_adapter.formulas import run_chat_completion, run_completion
from shared.llm_adapter.http_transport import HttpTransport
from shared.logging.logger import setup_logging
from shared.observability.metrics import metrics_response
from services.formula_service.config import FormulaServiceConfig

SERVICE_NAME = "formula_service"
cfg: FormulaServiceConfig | None = None
catalog: ModelCatalog | None = None
dispatcher: CompletionDispatcher | None = None
http_client: httpx.AsyncClient | None = None


@asynccontextmanager
async def lifespan(application: FastAPI):
    global cfg, catalog, dispatcher, http_client
    logger = setup_logging(SERVICE_NAME)

    cfg = FormulaServiceConfig.from_env()
    catalog = ModelCatalog.from_env()
    transport = get_transport(cfg.llm_transport)
    dispatcher = CompletionDispatcher(transport, catalog=catalog)
    http_client = httpx.AsyncClient(timeout=cfg.request_timeout)

    if isinstance(transport, HttpTransport) and not transport.has_api_key:
        logger.warning("No service API key configured; callers must send their own")

    logger.info(
        "Formula Service ready (transport=%s, match=%s)",
        cfg.llm_transport,
        catalog.match_mode,
    )
    yield

    logger.info("Shutting down")
    await transport.aclose()
    if http_client:
        await http_client.aclose()


app = FastAPI(
    title="Completion Formulas",
    version="0.1.0",
    description="Spreadsheet-style formulas backed by the OpenAI completion APIs",
    lifespan=lifespan,
)
logger = logging.getLogger(SERVICE_NAME)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _dispatcher_for(authorization: str | None) -> CompletionDispatcher:
    token = _bearer_token(authorization)
    if token is None or not cfg.forward_caller_token or cfg.llm_transport != "http":
        return dispatcher
    transport = HttpTransport(api_key=token, client=http_client)
    return CompletionDispatcher(transport, catalog=catalog)


async def _run(formula, active: CompletionDispatcher, params) -> JSONResponse:
    try:
        result = await formula(active, params)
    except QuotaExceeded as exc:
        return JSONResponse(
            content={"error": str(exc), "help_url": exc.help_url},
            status_code=429,
        )
    except MissingAPIKey as exc:
        return JSONResponse(content={"error": str(exc)}, status_code=401)
    except InvalidModelForChat as exc:
        return JSONResponse(
            content={"error": str(exc), "model": exc.model},
            status_code=400,
        )
    except StatusCodeError as exc:
        logger.warning("Upstream API returned HTTP %d", exc.status_code)
        return JSONResponse(
            content={"error": str(exc), "upstream_status": exc.status_code, "detail": exc.body},
            status_code=502,
        )
    except httpx.RequestError as exc:
        logger.exception("Upstream API unreachable")
        return JSONResponse(content={"error": str(exc)}, status_code=502)
    return JSONResponse(content={"result": result})


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "transport": cfg.llm_transport if cfg else None,
    }


@app.get("/metrics")
async def metrics():
    return metrics_response()


@app.post("/formulas/completion")
async def completion_formula(
    params: CompletionParams,
    authorization: str | None = Header(default=None),
):
    return await _run(run_completion, _dispatcher_for(authorization), params)


@app.post("/formulas/chat_completion")
async def chat_completion_formula(
    params: ChatCompletionParams,
    authorization: str | None = Header(default=None),
):
    return await _run(run_chat_completion, _dispatcher_for(authorization), params)
