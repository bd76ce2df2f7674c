import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from banquet_booking.config import settings
from banquet_booking.db import SessionLocal, init_database
from banquet_booking.routers import auth, bookings, halls, notifications
from banquet_booking.seed import seed_database

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing and seeding database"
    init_database()
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    logger.info("Banquet hall booker started")
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Banquet hall booker",
    description="Banquet hall booking with manager and admin approval based on FastAPI.",
    version="0.1.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check():
    return {"status": "healthy"}


app.include_router(auth.router)
app.include_router(halls.router)
app.include_router(bookings.router)
app.include_router(notifications.router)
