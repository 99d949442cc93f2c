"""Arive Lab: membership and content API."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from arivelab.config import get_settings
from arivelab.database import Base, SessionLocal, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from arivelab.models import (  # noqa: F401
    User, UserRegistration, Category, ContentItem, ContentImage,
    TeamMember, Notification, SiteSetting, AuditLog, ContactSubmission,
)
from arivelab.routers import auth, admin, users, content, categories, team_members, site_settings, contact_submissions
from arivelab.seed import seed_admin, seed_categories

log = logging.getLogger("uvicorn.error")

settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(users.router)
app.include_router(content.router)
app.include_router(categories.router)
app.include_router(team_members.router)
app.include_router(site_settings.router)
app.include_router(contact_submissions.router)


@app.on_event("startup")
def startup():
    if not (settings.mailgun_api_key and settings.mailgun_domain):
        log.warning("Mailgun not configured - moderation emails will be skipped; set MAILGUN_API_KEY and MAILGUN_DOMAIN in .env")
    try:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            seed_admin(db)
            seed_categories(db)
        finally:
            db.close()
    except Exception as e:
        log.warning("Database startup failed (tables/seed skipped). Check DATABASE_URL and network. Error: %s", e)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
