import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from cardvalue.config import settings
from cardvalue.rate_limit import limiter
from cardvalue.routers import templates, valuation
from cardvalue.services.template_loader import get_all_templates, load_templates, reload_if_changed

logger = logging.getLogger(__name__)


async def _watch_templates(interval: int) -> None:
    """Pick up edited card templates without a restart."""
    while True:
        await asyncio.sleep(interval)
        try:
            reload_if_changed()
        except Exception:
            logger.exception("Card template reload failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger("cardvalue").setLevel(settings.log_level.upper())
    load_templates()

    watcher = None
    if settings.template_reload_interval > 0:
        logger.info("Watching card templates every %ds", settings.template_reload_interval)
        watcher = asyncio.create_task(_watch_templates(settings.template_reload_interval))

    yield

    if watcher:
        watcher.cancel()
        with suppress(asyncio.CancelledError):
            await watcher


app = FastAPI(title="Card Valuation API", version="1.0.0", lifespan=lifespan)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"detail": "Too many valuation requests, slow down."})


def _cors_kwargs() -> dict:
    """ALLOWED_ORIGINS is a comma-separated list; empty or "*" allows any origin."""
    origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    if not origins or origins == ["*"]:
        return {"allow_origin_regex": ".*"}
    return {"allow_origins": origins}


app.add_middleware(
    CORSMiddleware,
    **_cors_kwargs(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(templates.router)
app.include_router(valuation.router)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.get("/api/health")
def health():
    return {"status": "ok", "templates": len(get_all_templates())}
