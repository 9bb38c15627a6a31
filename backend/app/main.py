# OrderDesk backend entrypoint: catalog, orders and the task board.

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import backend.app.db.base  # noqa: F401  registers every model before mappers configure
from backend.app.api import customers
from backend.app.api import ingredients
from backend.app.api import orders
from backend.app.api import products
from backend.app.api import task_templates
from backend.app.api import tasks
from backend.app.core.logging import configure_logging
from backend.app.core.settings import get_settings

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(customers.router)
app.include_router(ingredients.router)
app.include_router(products.router)
app.include_router(task_templates.router)
app.include_router(orders.router)
app.include_router(tasks.router)


@app.get("/")
def read_root():
    return {"app": "OrderDesk backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def create_tables():
    from backend.app.db.base import Base
    from backend.app.db.session import engine

    Base.metadata.create_all(bind=engine)
    logger.info("OrderDesk backend started (%s)", settings.environment)
