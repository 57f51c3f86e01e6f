"""
SkinHub Storefront - Main FastAPI Application

Single entry point for the catalog and cart API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skinhub.logging import get_logger
from skinhub.routers import cart_router, products_router
from skinhub.services.catalog_source import get_product_source

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Load the catalog snapshot up front so the first request is not slow
    source = get_product_source()
    logger.info(f"Catalog ready with {len(await source.get_all())} products")
    yield


app = FastAPI(
    title="SkinHub Storefront",
    description="Skincare catalog and cart API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products_router)
app.include_router(cart_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "skinhub"}
