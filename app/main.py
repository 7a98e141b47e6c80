from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from sqlmodel import Session
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.db.init_db import init_db
from app.db.session import engine
from app.services.account_seed import default_accounts, seed_accounts

configure_logging(settings.LOG_LEVEL, serialize=settings.LOG_JSON)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    if settings.SEED_ACCOUNTS:
        with Session(engine) as session:
            summary = seed_accounts(session, default_accounts())
        logger.info('seed.accounts', created=summary.created, updated=summary.updated, skipped=summary.skipped)
    yield

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

allow_origins = settings.CORS_ORIGINS
allow_credentials = '*' not in allow_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=['*'],
    allow_headers=['*'],
)

register_exception_handlers(app)
app.include_router(api_router)
app.mount('/uploads', StaticFiles(directory=settings.upload_dir, check_dir=False), name='uploads')
