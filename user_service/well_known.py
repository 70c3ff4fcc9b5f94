"""
Well-known endpoints: JWKS and a minimal authorization server metadata document.
"""
from fastapi import APIRouter

from user_service.config import ISSUER, PROFILE_SCOPES
from user_service.keys import get_jwks

router = APIRouter()


@router.get("/.well-known/jwks.json")
def jwks_json():
    """JSON Web Key Set used by the topic service to verify access tokens."""
    return get_jwks()


@router.get("/.well-known/oauth-authorization-server")
def authorization_server_metadata():
    scopes = sorted({scope for scopes in PROFILE_SCOPES.values() for scope in scopes})
    return {
        "issuer": ISSUER,
        "token_endpoint": f"{ISSUER}/token",
        "jwks_uri": f"{ISSUER}/.well-known/jwks.json",
        "grant_types_supported": ["password"],
        "scopes_supported": scopes,
        "token_endpoint_auth_methods_supported": ["none"],
    }
