"""
Flask extensions and initialization
"""
import functools
import logging
import os
import time

import firebase_admin
from firebase_admin import credentials, firestore, auth as fb_auth
from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from careercard.config import (
    CORS_ALLOW_HEADERS,
    CORS_ORIGINS,
    FIREBASE_PROJECT_ID,
    FIREBASE_STORAGE_BUCKET,
    LLM_RATE_LIMIT,
)
from careercard.utils.exceptions import AuthenticationError, CareerCardException, ConfigurationError

logger = logging.getLogger(__name__)

# Global Firestore client
db = None

TOKEN_VERIFY_ATTEMPTS = 3
TOKEN_VERIFY_DELAY = 0.5  # seconds, multiplied by the attempt number


def get_rate_limit_key():
    """Rate limit per authenticated user, falling back to the remote address."""
    user = getattr(request, 'firebase_user', None)
    if user and user.get('uid'):
        return f"user:{user['uid']}"
    return get_remote_address()


limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=["200 per day", "50 per hour"],
    storage_uri="memory://",
    strategy="fixed-window",
    headers_enabled=True,
)

# Applied to every endpoint that spends LLM tokens
llm_rate_limit = limiter.limit(LLM_RATE_LIMIT)


def init_firebase(app):
    """Initialize Firebase Admin and set up the Firestore client."""
    global db
    if firebase_admin._apps:  # already initialized
        db = firestore.client()
        return

    options = {
        'projectId': FIREBASE_PROJECT_ID,
        'storageBucket': FIREBASE_STORAGE_BUCKET,
    }
    cred_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")

    try:
        if cred_path and os.path.exists(cred_path):
            firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
            logger.info(f"Firebase initialized with credentials file: {cred_path}")
        else:
            # Cloud environments provide application default credentials
            logger.warning("No Firebase credentials file found, initializing with project ID only")
            firebase_admin.initialize_app(options=options)
        db = firestore.client()
        logger.info("Firestore client initialized")
    except Exception as e:
        # Let the app start; authenticated routes answer with a configuration error
        logger.error(f"Firebase initialization failed: {e}", exc_info=True)
        db = None


def get_db():
    """Returns the Firestore client instance."""
    global db
    if db is None:
        if not firebase_admin._apps:
            raise ConfigurationError(details={'reason': 'firestore_not_initialized'})
        db = firestore.client()
    return db


def verify_id_token(id_token: str) -> dict:
    """
    Verify a Firebase ID token, retrying transient network failures.

    Raises:
        AuthenticationError: token is malformed, expired, revoked or invalid
        ConfigurationError: Firebase Admin was never initialized
        CareerCardException: (503) verification kept failing on the network
    """
    if not firebase_admin._apps:
        logger.error("Firebase Admin SDK not initialized; cannot verify tokens")
        raise ConfigurationError()

    for attempt in range(1, TOKEN_VERIFY_ATTEMPTS + 1):
        try:
            return fb_auth.verify_id_token(id_token)
        except (fb_auth.InvalidIdTokenError, fb_auth.ExpiredIdTokenError,
                fb_auth.RevokedIdTokenError, fb_auth.UserDisabledError, ValueError) as e:
            logger.info(f"Token verification failed: {e}")
            raise AuthenticationError('Invalid or expired token')
        except (fb_auth.CertificateFetchError, ConnectionError, OSError) as e:
            if attempt == TOKEN_VERIFY_ATTEMPTS:
                logger.error(f"Token verification failed after {attempt} attempts: {e}")
                break
            logger.warning(f"Network error verifying token (attempt {attempt}/{TOKEN_VERIFY_ATTEMPTS}): {e}")
            time.sleep(TOKEN_VERIFY_DELAY * attempt)

    error = CareerCardException(
        'Authentication service temporarily unavailable. Please try again.',
        error_code='AUTH_UNAVAILABLE',
        details={'retry': True},
    )
    error.status_code = 503
    raise error


def require_firebase_auth(fn):
    """
    Decorator to require Firebase authentication for an endpoint.

    The bearer token is checked before the handler runs, so a request without
    one never reaches the LLM or the database. OPTIONS requests (CORS
    preflight) pass through untouched.
    """
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        if request.method != 'OPTIONS':
            auth_header = request.headers.get('Authorization', '')
            if not auth_header:
                raise AuthenticationError('Missing authorization header')
            if not auth_header.startswith('Bearer ') or not auth_header[7:].strip():
                raise AuthenticationError('Invalid authorization header')

            decoded = verify_id_token(auth_header.split(' ', 1)[1].strip())
            if not decoded.get('uid'):
                raise AuthenticationError('Invalid or expired token')
            request.firebase_user = decoded
            logger.info("Authenticated request", extra={'uid': decoded.get('uid')})

        return fn(*args, **kwargs)
    return wrapper


def current_user_id() -> str:
    """User id of the authenticated caller (inside @require_firebase_auth)."""
    user = getattr(request, 'firebase_user', None) or {}
    uid = user.get('uid')
    if not uid:
        raise AuthenticationError()
    return uid


def init_app_extensions(app: Flask):
    """Initializes Flask extensions like CORS, Rate Limiting, and Firebase."""
    limiter.init_app(app)

    CORS(app,
         resources={r"/api/*": {
             "origins": CORS_ORIGINS,
             "methods": ["GET", "POST", "PUT", "OPTIONS"],
             "allow_headers": CORS_ALLOW_HEADERS,
             "max_age": 3600,
         }},
         automatic_options=True)

    if app.config.get("TESTING"):
        logger.info("Testing mode: skipping Firebase initialization")
        return
    init_firebase(app)
