from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite default
    "http://localhost:8080",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
]


def allowed_origins() -> list[str]:
    explicit = os.getenv("CORS_ORIGINS")
    if explicit:
        return [origin.strip() for origin in explicit.split(",") if origin.strip()]
    if os.getenv("ENV", "development") in ("development", "staging"):
        return list(_DEV_ORIGINS)
    # production without CORS_ORIGINS: same-origin deployments only
    return []


def add_default_middlewares(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
