"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from loan_tracker.api.deps import init_db
from loan_tracker.api.routes import loans
from loan_tracker.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Loan Tracker",
        description="Loan amortization, payment tracking and payoff projections",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(loans.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
