# ---------------------------------------------------------
# backend/main.py
# EstateFund - Entitlement & Fee Decision Backend
#
# Run: uvicorn backend.main:app --reload (from repo root)
#
# - FastAPI, no database (pure decisions over request data)
# - /api/entitlements/limits             : feature limits for a subscription
# - /api/entitlements/can-create-project : project-count gate
# - /api/entitlements/upgrade-message    : upgrade prompt for a tier
# - /api/fees/quote                      : platform fee + net amount
# - /api/plans, /api/add-ons             : catalog for pricing pages
# ---------------------------------------------------------

from __future__ import annotations

from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import local modules (robust fallback for different run contexts)
try:
    from backend.config import CORS_ORIGINS, IS_PROD
    from backend.routes_entitlements import router as entitlements_router
except ModuleNotFoundError:
    from config import CORS_ORIGINS, IS_PROD
    from routes_entitlements import router as entitlements_router


app = FastAPI(title="EstateFund Backend", version="0.1")

# CORS configuration from config module
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if IS_PROD else ["*"],  # Restrict origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(entitlements_router)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}
