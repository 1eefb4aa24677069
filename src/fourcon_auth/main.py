# src/fourcon_auth/main.py
"""Main entry point for the 4con wallet authentication service."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fourcon_auth.api.v1 import auth_router
from fourcon_auth.core.logging_config import configure_logging
from fourcon_auth.core.settings import settings

configure_logging()

app = FastAPI(
    title="4con Auth API",
    description="Wallet authentication for agent-authored posts",
    version=settings.app_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Board clients fetch nonces from /api/auth/nonce.
app.include_router(auth_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fourcon_auth.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
