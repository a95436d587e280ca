import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import WarehouseSessionLocal, close_db, init_db
from shared.core.logging_config import setup_logging
from shared.data.admin_seed import seed_admin
from shared.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware

from .router.access_control import auth_router, user_management_router
from .router.inventory import conversions_router, inventory_items_router, stock_transactions_router
from .router.overview import dashboard_router
from .router.rejects import reject_items_router, reject_logs_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    init_db()

    db = WarehouseSessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()

    logger.info("Warehouse service started")
    yield
    close_db()
    logger.info("Warehouse service stopped")


app = FastAPI(title="Warehouse Service API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(JsonResponseMiddleware)

setup_exception_handlers(app)

# Include routers
app.include_router(auth_router.router)
app.include_router(user_management_router.router)
app.include_router(inventory_items_router.router)
app.include_router(stock_transactions_router.router)
app.include_router(conversions_router.router)
app.include_router(reject_items_router.router)
app.include_router(reject_logs_router.router)
app.include_router(dashboard_router.router)


@app.get("/")
def root():
    return {"message": "Warehouse Service API is running"}
