"""Fonctions de hashing pour mots de passe et refresh tokens (one-way)."""

import hashlib

import bcrypt

from app.core.config import settings


def hash_password(password: str) -> str:
    """
    Hash un mot de passe avec bcrypt.

    Le coût (BCRYPT_ROUNDS) est lu dans la configuration pour pouvoir
    être abaissé en environnement de test.

    Args:
        password: Mot de passe en clair

    Returns:
        Hash bcrypt du mot de passe
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Vérifie qu'un mot de passe correspond à son hash.

    Args:
        plain_password: Mot de passe en clair à vérifier
        hashed_password: Hash bcrypt stocké en base de données

    Returns:
        True si le mot de passe correspond, False sinon
    """
    if not hashed_password:
        return False
    try:
        password_bytes = plain_password.encode('utf-8')
        hashed_bytes = hashed_password.encode('utf-8')
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Hash mal formé en base
        return False


def hash_token(token: str) -> str:
    """
    Empreinte SHA-256 d'un refresh token.

    Déterministe (contrairement à bcrypt) pour permettre la recherche
    directe du token dans la table user_refresh_tokens.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()
