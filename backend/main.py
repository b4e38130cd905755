# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db
from services.errors import FatalInconsistency

# Router imports
from routes.shop import router as shop_router
from routes.cart import router as cart_router
from routes.orders import router as orders_router
from routes.account import router as account_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialization
init_db()

app = FastAPI(title="Campus Store API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(shop_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(account_router)

# Stock or balance went negative after validation: nothing was committed
@app.exception_handler(FatalInconsistency)
def fatal_inconsistency_handler(request: Request, exc: FatalInconsistency):
    logger.error("Fatal inconsistency on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"detail": "Order could not be placed, please try again"})

@app.get("/")
def read_root():
    return {"message": "Campus Store API is running"}
