from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from app.config import get_settings
from app.database import engine, Base
from app.api import products, orders, health
from app.models.order import OrderModel, OrderItemModel  # noqa: F401 (registers tables)
from app.models.product import ProductModel  # noqa: F401 (registers tables)
from app.storer.errors import OperationCancelled, StorerError

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title="Order Management System",
    description="""
    Backend API for a product catalog and customer orders.

    - **Product Management**: Full CRUD operations for products
    - **Order Management**: Orders with line items, written and deleted atomically
    - **Background Tasks**: Celery workers send order notifications

    ## Order aggregates
    An order and its items are stored in one transaction. Reads rebuild the
    order from its row and its item rows; there is no partial order.
    """,
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(orders.router, prefix="/api/v1")


@app.exception_handler(StorerError)
async def storer_error_handler(request: Request, exc: StorerError):
    """
    Map persistence failures that routes did not handle themselves.
    """
    if isinstance(exc, OperationCancelled):
        status_code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    detail = f"Failed {exc.step}"

    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": detail})


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": "Order Management System",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/api/v1/health"
    }
