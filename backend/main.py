# backend/main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import SessionLocal, init_db
from utils.errors import register_exception_handlers
from utils.seed import seed_products

# Import routerów
from routes.products import router as products_router
from routes.cart import router as cart_router
from routes.checkout import router as checkout_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema setup and one-time product seed
    init_db()
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_products(db)
        finally:
            db.close()
    yield


app = FastAPI(title="Shopping Cart API", version="1.0.0", lifespan=lifespan)

# CORS is open, there is no authentication
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Rejestracja routerów
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)


@app.get("/")
def read_root():
    return {"ok": True}

@app.get("/health")
def health():
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn

    logger.info("Backend running on port %s", settings.PORT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
