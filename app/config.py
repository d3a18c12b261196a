import os
from dotenv import load_dotenv

load_dotenv()

ENV = os.getenv("ENV", "dev")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./blog.db")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:8000").split(",")
    if origin.strip()
]

# Public site used to build links inside notification emails
SITE_URL = os.getenv("SITE_URL", "http://localhost:8000")

SUMMARY_MODEL = os.getenv("SUMMARY_MODEL", "gpt-4o-mini")

RESEND_API_URL = os.getenv("RESEND_API_URL", "https://api.resend.com/emails")
NOTIFICATION_FROM = os.getenv("NOTIFICATION_FROM", "Blog Platform <notifications@yourdomain.com>")

# ✅ LIMITS
CHAR_LIMIT_COMMENT = 5000
WORDS_PER_MINUTE = 200
