"""Gestion des tokens JWT (HS256, secrets distincts access / refresh)."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from jose import jwt, JWTError

from app.core.config import settings


def _secret_for(token_type: str) -> str:
    if token_type == "refresh":
        return settings.JWT_REFRESH_SECRET_KEY
    return settings.JWT_SECRET_KEY


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Crée un token JWT d'accès.

    Args:
        data: Claims à encoder (sub, role)
        expires_delta: Durée de validité personnalisée

    Returns:
        Token JWT signé
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    # Claims standards JWT
    to_encode.update({
        "exp": expire,
        "iat": now,
        "iss": settings.JWT_ISSUER,
        "type": "access"
    })

    return jwt.encode(to_encode, _secret_for("access"), algorithm=settings.ALGORITHM)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Crée un token JWT de refresh.

    Un identifiant aléatoire (jti) garantit que deux tokens émis dans la
    même seconde pour le même utilisateur restent distincts.

    Args:
        data: Claims minimaux (généralement juste sub)
        expires_delta: Durée de validité personnalisée

    Returns:
        Refresh token JWT signé
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))

    to_encode.update({
        "exp": expire,
        "iat": now,
        "iss": settings.JWT_ISSUER,
        "jti": secrets.token_urlsafe(16),
        "type": "refresh"
    })

    return jwt.encode(to_encode, _secret_for("refresh"), algorithm=settings.ALGORITHM)


def verify_token(token: str, token_type: str = "access") -> Dict[str, Any]:
    """
    Vérifie et décode un token JWT.

    Args:
        token: Token JWT à vérifier
        token_type: Type attendu ("access" ou "refresh")

    Returns:
        Payload décodé

    Raises:
        JWTError: Si le token est invalide, expiré ou de mauvais type
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_iat": True,
                "require_exp": True,
                "require_iat": True
            }
        )
    except JWTError as e:
        raise JWTError(f"Token validation failed: {str(e)}")

    # Vérifier le type de token
    if payload.get("type") != token_type:
        raise JWTError(f"Token type mismatch. Expected {token_type}")

    return payload
