import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from phoenixapi import containers
from phoenixapi.config import settings
from phoenixapi.core.exception_handlers import register_exception_handlers
from phoenixapi.core.logging_middleware import LoggingMiddleware
from phoenixapi.logging_config import setup_logging
from phoenixapi.routers import (
    auth_router,
    community_router,
    health_router,
    market_router,
    message_router,
    plaid_router,
    portfolio_router,
    user_router,
    watchlist_router,
)

load_dotenv("phoenixapi/.env")
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
app.container = containers.Container()  # type: ignore

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

register_exception_handlers(app)


@app.get("/")
def hello() -> dict:
    return {"message": f"{settings.APP_NAME} is running"}


app.include_router(health_router.router)
for module in (
    auth_router,
    user_router,
    watchlist_router,
    community_router,
    message_router,
    market_router,
    plaid_router,
    portfolio_router,
):
    app.include_router(module.router, prefix=settings.API_V1_STR)

logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")

handler = Mangum(app)
