"""
JWT validation via the user service's JWKS.
Handlers receive the verified caller as an explicit `Caller` value.
"""
import logging
from dataclasses import dataclass
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from topic_service.config import API_AUDIENCE, ISSUER
from topic_service.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

JWKS_URI = f"{ISSUER}/.well-known/jwks.json"

# Single shared client; PyJWKClient caches the JWK set and keys
_jwks_client: PyJWKClient | None = None


def get_jwks_client() -> PyJWKClient:
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(
            uri=JWKS_URI,
            cache_jwk_set=True,
            lifespan=300,
        )
    return _jwks_client


@dataclass(frozen=True)
class Caller:
    user_id: int
    scopes: frozenset[str]
    token: str


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Extract Bearer token from Authorization header. Raises 401 if missing or not Bearer."""
    if credentials is None:
        raise _unauthorized("Cabeçalho Authorization ausente")
    if credentials.scheme.lower() != "bearer":
        raise _unauthorized("Esquema Bearer obrigatório")
    return credentials.credentials


def verify_access_token(token: str) -> dict:
    """
    Verify JWT signature via JWKS and validate iss, aud, exp.
    Returns decoded claims. Raises HTTPException on invalid token,
    ServiceUnavailableError when the JWKS cannot be fetched.
    """
    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=API_AUDIENCE,
            issuer=ISSUER,
            options={"verify_exp": True, "verify_aud": True, "verify_iss": True},
        )
    except jwt.PyJWKClientConnectionError as e:
        logger.warning("JWKS unreachable at %s: %s", JWKS_URI, e)
        raise ServiceUnavailableError("O serviço solicitado está fora do ar")
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token expirado")
    except jwt.InvalidAudienceError:
        raise _unauthorized("Audiência inválida")
    except jwt.InvalidIssuerError:
        raise _unauthorized("Emissor inválido")
    except jwt.PyJWTError as e:
        logger.debug("JWT verification failed: %s", e)
        raise _unauthorized("Falha na verificação do token")


def _parse_scope(scope_value: str | list | None) -> frozenset[str]:
    """Normalize scope claim to a set of scope strings."""
    if scope_value is None:
        return frozenset()
    if isinstance(scope_value, list):
        return frozenset(str(s) for s in scope_value)
    return frozenset(scope_value.split())


def get_caller(
    token: Annotated[str, Depends(get_bearer_token)],
) -> Caller:
    """Dependency: valid Bearer token -> Caller with the numeric `user_id` claim."""
    claims = verify_access_token(token)
    try:
        user_id = int(str(claims["user_id"]))
    except (KeyError, ValueError):
        raise _unauthorized("Claim 'user_id' ausente ou inválida")
    if user_id <= 0:
        raise _unauthorized("Claim 'user_id' ausente ou inválida")
    return Caller(user_id=user_id, scopes=_parse_scope(claims.get("scope")), token=token)


def require_scope(required: str):
    """Dependency factory: require the given scope in the access token."""

    def _check(caller: Annotated[Caller, Depends(get_caller)]) -> Caller:
        if required not in caller.scopes:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Escopo '{required}' necessário",
            )
        return caller

    return Depends(_check)
