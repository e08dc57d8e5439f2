"""
Sales Ledger API - Main Application.

FastAPI application serving the sales API, the dashboard pages and the login
gate that protects them.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from api import __version__
from api.dependencies import get_settings
from api.routers.auth import SESSION_COOKIE

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI application
app = FastAPI(
    title="Sales Ledger API",
    description="Record sales and mirror the ledger summary into a Discord webhook message",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Paths reachable without the session cookie.
_PUBLIC_PREFIXES = ("/api", "/login", "/health", "/docs", "/redoc", "/openapi.json")


def requires_login(path: str) -> bool:
    """Pages need the session cookie; the API, login page and static files don't."""
    if "." in path:
        return False
    return not any(path == prefix or path.startswith(prefix + "/") for prefix in _PUBLIC_PREFIXES)


@app.middleware("http")
async def login_gate(request: Request, call_next):
    if requires_login(request.url.path) and not request.cookies.get(SESSION_COOKIE):
        return RedirectResponse(url="/login", status_code=303)
    return await call_next(request)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "sales-ledger-api"
    }


# Import and include routers
from api.routers import auth, pages, sales

app.include_router(sales.router, prefix="/api", tags=["Sales"])
app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(pages.router, tags=["Pages"])
