# headless_api/main.py
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from . import __version__
from .auth import check_auth
from .config import Settings, get_settings
from .context import ApiRequest
from .dispatch import dispatch
from .errors import ApiDisabledError, ApiError, MissingParameterError
from .models import ApiConfig
from .observability import setup_logging
from .storage import load_config


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-API-Key",
}


class PrettyJSONResponse(JSONResponse):
    """Indented JSON with non-ASCII characters left as-is."""

    media_type = "application/json; charset=utf-8"

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content, ensure_ascii=False, indent=4, allow_nan=False,
        ).encode("utf-8")


def cors_headers(config: ApiConfig) -> Dict[str, str]:
    return dict(CORS_HEADERS) if config.cors_enabled else {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    # First start writes the config file with a fresh key
    load_config(settings.api_config_path)
    logger.info("Headless CMS API started (data: %s)", settings.data_path)
    yield
    logger.info("Headless CMS API shutting down")


app = FastAPI(
    title="Headless CMS API",
    description=(
        "Read-only JSON endpoints over a GetSimple page store and its "
        "optional SimpleBlog database."
    ),
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/")
def api_root(request: Request, settings: Settings = Depends(get_settings)):
    params = request.query_params
    name = params.get("api")
    if name is None:
        raise MissingParameterError("API endpoint parameter (api) is required", "api")

    config = load_config(settings.api_config_path)
    if not config.api_enabled:
        raise ApiDisabledError()

    # From here on every response, errors included, carries the CORS headers
    headers = cors_headers(config)
    try:
        check_auth(config, params, request.headers)
        payload = dispatch(name, ApiRequest(settings, config, params, request.headers))
    except ApiError as exc:
        logger.warning(
            "%s on api=%s: %s", exc.code, name, exc.message,
            extra={"endpoint": name, "error_code": exc.code, "status": exc.http_status},
        )
        return PrettyJSONResponse(exc.to_response(), status_code=exc.http_status, headers=headers)
    return PrettyJSONResponse(payload, headers=headers)


@app.options("/")
def api_preflight(settings: Settings = Depends(get_settings)):
    config = load_config(settings.api_config_path)
    return Response(status_code=204, headers=cors_headers(config))


# ─── GLOBAL ERROR HANDLERS ──────────────────────────────────────

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    logger.warning(
        "%s: %s", exc.code, exc.message,
        extra={"error_code": exc.code, "path": request.url.path, "status": exc.http_status},
    )
    return PrettyJSONResponse(exc.to_response(), status_code=exc.http_status)


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all; never leaks internal details."""
    logger.error(
        "Unhandled exception on %s: %s", request.url.path, exc,
        exc_info=True,
    )
    return PrettyJSONResponse({"error": "Internal server error"}, status_code=500)
