import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import ENV, LOG_LEVEL, CORS_ORIGINS
from app.database import engine, Base

# Models must be imported so their tables (and counter events) are registered
from app.models.profile import Profile
from app.models.blog import Blog
from app.models.like import BlogLike
from app.models.bookmark import Bookmark
from app.models.comment import Comment
from app.models.admin_whitelist import AdminWhitelist

from app.api.blog import router as blog_router
from app.api.comments import router as comments_router
from app.api.profile import router as profile_router
from app.api.admin import router as admin_router
from app.api.functions import router as functions_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="BloggerHub API",
    docs_url=None if ENV == "prod" else "/docs",
    redoc_url=None if ENV == "prod" else "/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(blog_router)
app.include_router(comments_router)
app.include_router(profile_router)
app.include_router(admin_router)
app.include_router(functions_router)

logger.info("BloggerHub API started (env=%s)", ENV)
