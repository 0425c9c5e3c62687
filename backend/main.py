# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db
from services.errors import ShopError

# Import routerów
from routes.auth import router as auth_router
from routes.categories import router as categories_router
from routes.products import router as products_router
from routes.campaigns import router as campaigns_router, categories_router as campaign_categories_router
from routes.cart import router as cart_router
from routes.checkout import router as checkout_router
from routes.history import router as history_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Inicjalizacja
init_db()

app = FastAPI(title="E-commerce Backend API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Domain errors share the HTTPException body shape
@app.exception_handler(ShopError)
def shop_error_handler(request: Request, exc: ShopError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

# Rejestracja routerów
app.include_router(auth_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(campaigns_router)
app.include_router(campaign_categories_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(history_router)

@app.get("/health")
def health_check():
    return {"status": "ok"}
