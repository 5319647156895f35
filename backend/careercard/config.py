"""
Application configuration - all constants and environment variables
"""
import logging
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# ========================================
# API Keys & Secrets
# ========================================
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")

# ========================================
# LLM Gateway Configuration
# ========================================
# Any OpenAI-compatible chat completion endpoint with tool calling
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://ai.gateway.lovable.dev/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "google/gemini-2.5-flash")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "120"))
LLM_RATE_LIMIT = os.getenv("LLM_RATE_LIMIT", "20 per minute")

# ========================================
# Firebase Configuration
# ========================================
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "career-card-builder")
FIREBASE_STORAGE_BUCKET = os.getenv("FIREBASE_STORAGE_BUCKET", f"{FIREBASE_PROJECT_ID}.appspot.com")
CAREER_CARDS_COLLECTION = os.getenv("CAREER_CARDS_COLLECTION", "career_cards")

# ========================================
# CORS
# ========================================
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

# ========================================
# Input Ceilings
# ========================================
RESUME_TEXT_MAX_LENGTH = int(os.getenv("RESUME_TEXT_MAX_LENGTH", "50000"))
DESCRIPTION_MAX_LENGTH = int(os.getenv("DESCRIPTION_MAX_LENGTH", "5000"))
PORTFOLIO_TEXT_LIMIT = int(os.getenv("PORTFOLIO_TEXT_LIMIT", "15000"))
MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", "20"))
URL_MAX_LENGTH = 500
PORTFOLIO_FETCH_TIMEOUT = 20  # seconds
PORTFOLIO_MAX_BYTES = int(os.getenv("PORTFOLIO_MAX_BYTES", str(2 * 1024 * 1024)))
PORTFOLIO_MAX_REDIRECTS = 5

# ========================================
# Validation
# ========================================
if not LLM_API_KEY:
    logger.warning("LLM_API_KEY not found in environment; AI parsing endpoints will fail")
