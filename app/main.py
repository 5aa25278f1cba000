import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL, UPLOAD_DIR
from database.init import Base, SessionLocal, engine
from services.role_service import ensure_default_roles
from routes import (
    auth_routes,
    building_routes,
    apartment_routes,
    visit_request_routes,
    tenant_routes,
    venue_booking_routes,
    payment_routes,
    complaint_routes,
    review_routes,
    calendar_routes,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Apartment Management API", debug=DEBUG)

uploads_dir = os.path.join(os.getcwd(), UPLOAD_DIR)
os.makedirs(uploads_dir, exist_ok=True)

app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_routes.router)
app.include_router(building_routes.router)
app.include_router(apartment_routes.router)
app.include_router(visit_request_routes.router)
app.include_router(tenant_routes.router)
app.include_router(venue_booking_routes.router)
app.include_router(payment_routes.router)
app.include_router(complaint_routes.router)
app.include_router(review_routes.router)
app.include_router(calendar_routes.router)


@app.on_event("startup")
def seed_roles():
    db = SessionLocal()
    try:
        ensure_default_roles(db)
    finally:
        SessionLocal.remove()
    logger.info("Default roles ready")


@app.get("/")
def read_root():
    return {"name": "Apartment Management API", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)
