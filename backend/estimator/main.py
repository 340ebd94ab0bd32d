from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import clients, config as config_router, estimates, invoices
from .core.database import lifespan_context

app = FastAPI(
    title="Construction Estimation API",
    version="1.0.0",
    lifespan=lifespan_context,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(clients.router)
app.include_router(estimates.router)
app.include_router(invoices.router)
app.include_router(config_router.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
