"""
RSA signing keys for access tokens issued by the user service.
The current key signs new tokens; an optional previous key stays in the JWKS
so tokens signed before a rotation still verify at the topic service.
"""
import base64
import logging
from pathlib import Path

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import generate_private_key

logger = logging.getLogger(__name__)

_KEY_BITS = 2048
KID_CURRENT = "forumhub-user-key"
KID_PREVIOUS = "forumhub-user-key-prev"

_current_kid: str | None = None
_keys_by_kid: dict[str, object] = {}


def _read_pem(path: Path):
    return serialization.load_pem_private_key(path.read_bytes(), password=None, backend=default_backend())


def load_or_create_signing_key(path: str) -> object:
    """Load the RSA private key at path, generating and saving one if missing or unreadable."""
    p = Path(path)
    if p.exists():
        try:
            return _read_pem(p)
        except (ValueError, TypeError, OSError) as e:
            logger.warning("Failed to load signing key from %s: %s; generating new key", path, e)
    key = generate_private_key(65537, _KEY_BITS, default_backend())
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    try:
        p.write_bytes(pem)
        logger.info("Generated signing key and saved it to %s", path)
    except OSError as e:
        logger.warning("Could not save signing key to %s: %s", path, e)
    return key


def _b64url_uint(value: int) -> str:
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def public_key_to_jwk(public_key, kid: str) -> dict:
    numbers = public_key.public_numbers()
    return {
        "kty": "RSA",
        "kid": kid,
        "alg": "RS256",
        "use": "sig",
        "n": _b64url_uint(numbers.n),
        "e": _b64url_uint(numbers.e),
    }


def _ensure_keys_loaded() -> None:
    global _current_kid
    if _current_kid is not None:
        return
    from user_service.config import SIGNING_KEY_PATH, SIGNING_KEY_PREVIOUS_PATH

    _keys_by_kid[KID_CURRENT] = load_or_create_signing_key(SIGNING_KEY_PATH)
    _current_kid = KID_CURRENT

    if SIGNING_KEY_PREVIOUS_PATH and Path(SIGNING_KEY_PREVIOUS_PATH).exists():
        try:
            _keys_by_kid[KID_PREVIOUS] = _read_pem(Path(SIGNING_KEY_PREVIOUS_PATH))
            logger.info("Loaded previous signing key (kid=%s) for rotation", KID_PREVIOUS)
        except (ValueError, TypeError, OSError) as e:
            logger.warning("Failed to load previous signing key from %s: %s", SIGNING_KEY_PREVIOUS_PATH, e)


def get_signing_key() -> tuple[object, str]:
    """Return (private_key, kid) used to sign new tokens."""
    _ensure_keys_loaded()
    return _keys_by_kid[_current_kid], _current_kid


def get_public_key_for_kid(kid: str) -> object | None:
    _ensure_keys_loaded()
    private_key = _keys_by_kid.get(kid)
    if private_key is None:
        return None
    return private_key.public_key()


def get_jwks() -> dict:
    """JWKS with every loaded key."""
    _ensure_keys_loaded()
    return {"keys": [public_key_to_jwk(k.public_key(), kid) for kid, k in _keys_by_kid.items()]}
