# Dough Formula API Main Entry Point
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from . import __version__
from .deps import init_timer, reset_timer
from .errors import InvalidParameters
from .routers.dough import router as dough_router
from .routers.prefs import router as prefs_router
from .routers.ready import router as ready_router
from .routers.share import router as share_router
from .routers.styles import router as styles_router
from .routers.timer import router as timer_router
from .routers.units import router as units_router
from .settings import settings

# Configure structured logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("doughformula")


@asynccontextmanager
async def lifespan(app: FastAPI):
    timer = await init_timer()
    logger.info(f"Emergency timer loaded: {timer.status.value}, {timer.remaining}ms remaining")
    yield
    # Leave the saved snapshot in place so the next start resumes the countdown
    reset_timer()


# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

app = FastAPI(title="Dough Formula API", version=__version__, lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(InvalidParameters)
async def invalid_parameters_handler(request: Request, exc: InvalidParameters):
    logger.info(f"Rejected recipe parameters on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": "invalid_parameters", "field": exc.field},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(dough_router, prefix="/api/dough", tags=["dough"])
app.include_router(styles_router, prefix="/api", tags=["styles"])
app.include_router(share_router, prefix="/api/share", tags=["share"])
app.include_router(units_router, prefix="/api/units", tags=["units"])
app.include_router(prefs_router, prefix="/api", tags=["prefs"])
app.include_router(timer_router, prefix="/api/timer", tags=["timer"])
