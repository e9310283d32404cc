"""
User models - Comptes du personnel.

Ce module contient les modèles liés aux utilisateurs :
- User : Utilisateurs (admin, medecin, assistant)
- UserRefreshToken : Refresh tokens révocables
"""

from app.models.user.user import User
from app.models.user.refresh_token import UserRefreshToken

__all__ = [
    "User",
    "UserRefreshToken",
]
