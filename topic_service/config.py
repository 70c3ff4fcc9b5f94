"""
Topic service configuration.
Issuer and API audience are public identifiers, not secrets.
"""
import os

# User service: issues the access tokens and answers author lookups
ISSUER = os.environ.get("FORUMHUB_ISSUER", "http://127.0.0.1:9000").rstrip("/")
USER_SERVICE_URL = os.environ.get("FORUMHUB_USER_SERVICE_URL", ISSUER).rstrip("/")
USER_SUMMARY_PATH = "/api-forum/v1/forumhub/users/summary-info"

# This API's audience; access tokens must carry it in aud
API_AUDIENCE = os.environ.get("FORUMHUB_API_AUDIENCE", "http://127.0.0.1:8080")

DATABASE_URL = os.environ.get("TOPIC_DATABASE_URL", "sqlite:///./topic_service.db")

# Comma-separated course names created on startup when missing
SEED_COURSES = os.environ.get("FORUMHUB_SEED_COURSES", "")

DEFAULT_PAGE_SIZE = int(os.environ.get("FORUMHUB_DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.environ.get("FORUMHUB_MAX_PAGE_SIZE", "100"))

# Scopes required by protected routes
SCOPE_TOPIC_EDIT = "topic:edit"
SCOPE_TOPIC_DELETE = "topic:delete"
SCOPE_ANSWER_DELETE = "answer:delete"

API_PREFIX = "/api-forum/v1/forumhub"
