# main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from votebox import config
from votebox.crud import seed_defaults
from votebox.routes.admin_routes import router as admin_router
from votebox.routes.candidate_routes import router as candidate_router
from votebox.routes.vote_routes import vote_router
from votebox.storage import Storage, build_storage

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(
    storage: Optional[Storage] = None,
    seed: bool = True,
    eligible_voters: Optional[int] = config.ELIGIBLE_VOTERS,
) -> FastAPI:
    """
    Build the API around one storage instance.

    When no storage is passed, the backend named by STORAGE_BACKEND is
    constructed here and closed on shutdown.
    """
    owns_storage = storage is None
    if storage is None:
        storage = build_storage()

    if seed:
        seed_defaults(
            storage,
            config.ADMIN_USERNAME,
            config.ADMIN_PASSWORD,
            hash_admin_password=config.HASH_ADMIN_PASSWORDS,
            sample_candidates=config.SAMPLE_CANDIDATES if config.SEED_SAMPLE_CANDIDATES else (),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_storage:
            storage.close()

    app = FastAPI(title="VOTEBOX - Election Voting API", lifespan=lifespan)
    app.state.storage = storage
    app.state.eligible_voters = eligible_voters

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Malformed input is a client error: 400 with the pydantic error list
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
        )

    app.include_router(candidate_router)
    app.include_router(vote_router)
    app.include_router(admin_router)

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the VOTEBOX Election API"}

    @app.get("/health", tags=["Root"])
    def health_check():
        return {"status": "healthy", "storage": app.state.storage.name}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    logger.info(f"VOTEBOX API ready with {storage.name} storage")
    return app


# No module-level app: importing this module must not open storage.
# Serve with: uvicorn votebox.main:create_app --factory
if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(create_app(), host="0.0.0.0", port=port)
