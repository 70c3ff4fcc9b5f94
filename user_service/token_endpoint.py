"""
Token endpoint (POST /token). Resource owner password grant issuing RS256
access tokens with the `user_id` claim and profile-derived scopes.
Also holds verification of those tokens for the user service's own routes.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from user_service.config import (
    ACCESS_TOKEN_EXPIRES,
    API_AUDIENCE,
    ISSUER,
    PROFILE_SCOPES,
    RATE_LIMIT_TOKEN_PER_MINUTE,
)
from user_service.database import get_db
from user_service.keys import get_public_key_for_kid, get_signing_key
from user_service.models import User
from user_service.rate_limit import check_and_consume
from user_service.seed import verify_password

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def scopes_for(user: User) -> str:
    return " ".join(PROFILE_SCOPES[user.profile.profile_name.value])


def issue_access_token(user: User) -> tuple[str, str]:
    """Build a signed access token for user; return (token, scope)."""
    private_key, kid = get_signing_key()
    now = datetime.now(timezone.utc)
    scope = scopes_for(user)
    payload = {
        "iss": ISSUER,
        "sub": str(user.id),
        "aud": API_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ACCESS_TOKEN_EXPIRES)).timestamp()),
        "user_id": str(user.id),
        "scope": scope,
    }
    token = jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid, "typ": "JWT"})
    return token, scope


@router.post("/token")
def token(
    request: Request,
    grant_type: str = Form(...),
    username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    ip = request.client.host if request.client else "unknown"
    allowed, retry_after = check_and_consume(f"token:{ip}", RATE_LIMIT_TOKEN_PER_MINUTE)
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Limite de requisições excedido, tente novamente mais tarde",
            headers={"Retry-After": str(retry_after)},
        )
    if grant_type != "password":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tipo de concessão não suportado")

    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Token refused for username=%s ip=%s", username, ip)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário ou senha inválidos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token, scope = issue_access_token(user)
    logger.info("Access token issued for user_id=%s", user.id)
    return {
        "access_token": access_token,
        "token_type": "Bearer",
        "expires_in": ACCESS_TOKEN_EXPIRES,
        "scope": scope,
    }


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> dict:
    """Dependency: Bearer token issued by this service -> decoded claims."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Token de acesso ausente")
    try:
        kid = jwt.get_unverified_header(credentials.credentials).get("kid")
        public_key = get_public_key_for_kid(kid) if kid else None
        if public_key is None:
            raise _unauthorized("Token de acesso inválido")
        return jwt.decode(
            credentials.credentials,
            public_key,
            algorithms=["RS256"],
            audience=API_AUDIENCE,
            issuer=ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token de acesso expirado")
    except jwt.InvalidTokenError as e:
        logger.debug("Token verification failed: %s", e)
        raise _unauthorized("Token de acesso inválido")


def require_scope(required: str):
    """Dependency factory: require the given scope in the access token."""

    def _check(claims: Annotated[dict, Depends(get_claims)]) -> dict:
        if required not in (claims.get("scope") or "").split():
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Escopo '{required}' necessário",
            )
        return claims

    return Depends(_check)
