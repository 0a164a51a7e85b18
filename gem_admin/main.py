from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
import logging

from gem_admin.config import get_settings
from gem_admin.routers import analytics, auth, consultations, orders, products, settings as settings_router, videos
from gem_admin.services.product_form import DraftValidationError
from gem_admin.utils.api_client import ApiError, AuthenticationRequired
from gem_admin.utils.storage import UploadRejected

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("gem_admin")

app = FastAPI(title="Gem Admin")


@app.on_event("startup")
def on_startup():
    # Ensure local tables exist after all models are imported
    from gem_admin.models.session import Base, engine
    import gem_admin.models.settings  # register DashboardSettings model
    Base.metadata.create_all(bind=engine)


# ===== Error mapping =====
@app.exception_handler(AuthenticationRequired)
def on_authentication_required(request: Request, exc: AuthenticationRequired):
    logger.info("Redirecting %s %s to login: %s", request.method, request.url.path, exc.message)
    return RedirectResponse(url=get_settings().LOGIN_ROUTE, status_code=303)


@app.exception_handler(ApiError)
def on_api_error(request: Request, exc: ApiError):
    status = exc.status_code if exc.status_code and exc.status_code < 500 else 502
    logger.warning("Upstream error on %s %s (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message})


@app.exception_handler(DraftValidationError)
def on_draft_invalid(request: Request, exc: DraftValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})


@app.exception_handler(UploadRejected)
def on_upload_rejected(request: Request, exc: UploadRejected):
    logger.info("Upload rejected: %s", exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# CORS configuration for the dashboard frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get(settings.LOGIN_ROUTE, include_in_schema=False)
def login_page():
    # The frontend renders the form; this is where signed-out requests land
    return {"message": "Please sign in", "loginEndpoint": "/api/auth/login"}


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
app.include_router(consultations.router, prefix="/api/consultations", tags=["consultations"])
app.include_router(videos.router, prefix="/api/videos", tags=["videos"])
app.include_router(analytics.router, prefix="/api", tags=["analytics"])
app.include_router(settings_router.router, prefix="/api/settings", tags=["settings"])


# --- Entry point for local runs ---
if __name__ == "__main__":
    import uvicorn, os
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("gem_admin.main:app", host="0.0.0.0", port=port, reload=False)
