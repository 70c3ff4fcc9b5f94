"""
HTTP client for the user service's author lookup.
Relays the caller's bearer token; no retries, httpx default timeout.
"""
import logging
from dataclasses import dataclass

import httpx

from topic_service.config import USER_SERVICE_URL, USER_SUMMARY_PATH
from topic_service.exceptions import (
    InstanceNotFoundError,
    ServiceUnavailableError,
    UserServiceTimeoutError,
)
from topic_service.models import ProfileName

logger = logging.getLogger(__name__)

UNAVAILABLE_DETAIL = "O serviço solicitado está fora do ar"


@dataclass(frozen=True)
class AuthorRecord:
    id: int
    username: str
    email: str | None
    profile: ProfileName | None


class UserClient:
    def __init__(self, base_url: str = USER_SERVICE_URL, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url
        self.transport = transport

    def get_author_by_id(self, user_id: int, access_token: str | None = None) -> AuthorRecord:
        headers = {"Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        try:
            with httpx.Client(base_url=self.base_url, transport=self.transport) as client:
                r = client.get(USER_SUMMARY_PATH, params={"user_id": user_id}, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("User service timed out for user_id=%s: %s", user_id, e)
            raise UserServiceTimeoutError(UNAVAILABLE_DETAIL)
        except httpx.HTTPError as e:
            logger.warning("User service unreachable for user_id=%s: %s", user_id, e)
            raise ServiceUnavailableError(UNAVAILABLE_DETAIL)

        if r.status_code == 404:
            raise InstanceNotFoundError("Usuário não encontrado")
        if not r.is_success:
            logger.warning("User service answered %s for user_id=%s", r.status_code, user_id)
            raise ServiceUnavailableError(UNAVAILABLE_DETAIL)

        try:
            data = r.json()
            profile = data.get("profile")
            return AuthorRecord(
                id=int(data["id"]),
                username=str(data["username"]),
                email=data.get("email"),
                profile=ProfileName(profile) if profile else None,
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Unreadable user service payload for user_id=%s: %s", user_id, e)
            raise ServiceUnavailableError(UNAVAILABLE_DETAIL)


def get_user_client() -> UserClient:
    """Dependency: client for the configured user service (overridden in tests)."""
    return UserClient()
