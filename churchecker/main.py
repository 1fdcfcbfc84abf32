import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from churchecker.config.settings import settings
from churchecker.modules.auth import routes as auth_routes
from churchecker.modules.profiles import routes as profiles_routes
from churchecker.modules.churches import routes as churches_routes
from churchecker.modules.invites import routes as invites_routes
from churchecker.modules.people import routes as people_routes
from churchecker.modules.attendance import routes as attendance_routes
from churchecker.modules.announcements import routes as announcements_routes
from churchecker.modules.prayers import routes as prayers_routes
from churchecker.modules.offerings import routes as offerings_routes
from churchecker.modules.expenses import routes as expenses_routes
from churchecker.modules.events import routes as events_routes
from churchecker.modules.schedules import routes as schedules_routes
from churchecker.modules.verses import routes as verses_routes
from churchecker.modules.diagnostics import routes as diagnostics_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Church-scoped routers live under /churches/{church_id}/...
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(profiles_routes.router, prefix="/api/v1")
app.include_router(churches_routes.router, prefix="/api/v1")
app.include_router(invites_routes.router, prefix="/api/v1")
app.include_router(invites_routes.public_router, prefix="/api/v1")
app.include_router(people_routes.router, prefix="/api/v1")
app.include_router(attendance_routes.router, prefix="/api/v1")
app.include_router(announcements_routes.router, prefix="/api/v1")
app.include_router(prayers_routes.router, prefix="/api/v1")
app.include_router(offerings_routes.router, prefix="/api/v1")
app.include_router(expenses_routes.router, prefix="/api/v1")
app.include_router(events_routes.router, prefix="/api/v1")
app.include_router(schedules_routes.router, prefix="/api/v1")
app.include_router(verses_routes.router, prefix="/api/v1")
app.include_router(diagnostics_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info(f"Application startup ({settings.environment})")
    if not settings.supabase_service_role_key:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY not set: Kakao sign-in is disabled")
    if not settings.kakao_rest_api_key:
        logger.warning("KAKAO_REST_API_KEY not set: Kakao OAuth routes will fail")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set: daily verse uses the fallback list")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to churchecker", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness check: configuration needed to reach Supabase is present."""
    if not settings.supabase_url or not settings.supabase_key:
        return JSONResponse(status_code=503, content={"status": "not ready", "detail": "Supabase is not configured"})
    return {"status": "ready"}
