"""
User service configuration.
No secrets in this file; credentials come from env or DB.
"""
import os

# Issuer URL (public identifier); the topic service fetches JWKS from here
ISSUER = os.environ.get("FORUMHUB_ISSUER", "http://127.0.0.1:9000").rstrip("/")

# Audience of the access tokens (the topic service)
API_AUDIENCE = os.environ.get("FORUMHUB_API_AUDIENCE", "http://127.0.0.1:8080")

# SQLite DB for development
DATABASE_URL = os.environ.get("USER_DATABASE_URL", "sqlite:///./user_service.db")

# Access token lifetime (seconds)
ACCESS_TOKEN_EXPIRES = int(os.environ.get("FORUMHUB_ACCESS_TOKEN_EXPIRES", "3600"))

# Path to RSA private key PEM file for signing tokens. Generated on first start if missing.
SIGNING_KEY_PATH = os.environ.get("FORUMHUB_SIGNING_KEY_PATH", ".user_service_signing_key.pem")
# Optional previous key for rotation: published in JWKS, never used for new tokens.
SIGNING_KEY_PREVIOUS_PATH = os.environ.get("FORUMHUB_SIGNING_KEY_PREVIOUS_PATH", "").strip() or None

# Rate limiting for POST /token: per-IP, per minute
RATE_LIMIT_TOKEN_PER_MINUTE = int(os.environ.get("FORUMHUB_RATE_LIMIT_TOKEN_PER_MINUTE", "20"))

# Scopes granted per profile
SCOPE_TOPIC_EDIT = "topic:edit"
SCOPE_TOPIC_DELETE = "topic:delete"
SCOPE_ANSWER_DELETE = "answer:delete"
SCOPE_USER_ADMIN = "user:admin"

BASE_SCOPES = (SCOPE_TOPIC_EDIT, SCOPE_TOPIC_DELETE, SCOPE_ANSWER_DELETE)
PROFILE_SCOPES = {
    "BASIC": BASE_SCOPES,
    "MOD": BASE_SCOPES,
    "ADM": BASE_SCOPES + (SCOPE_USER_ADMIN,),
}

API_PREFIX = "/api-forum/v1/forumhub/users"
