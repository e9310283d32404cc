"""
Base de données SQLAlchemy - Configuration centrale
Importe tous les modèles pour que SQLAlchemy connaisse toutes les relations
"""
from app.database.base_class import Base

# === IMPORTS DES MODÈLES ===
# Tous les modèles doivent être importés ici pour que :
# 1. SQLAlchemy connaisse toutes les relations entre tables
# 2. Alembic puisse détecter tous les modèles pour les migrations
# 3. Les métadonnées soient complètes lors de create_all()
from app.models import (  # noqa: F401
    Counter,
    User,
    UserRefreshToken,
    Patient,
    CareEpisode,
    Appointment,
    Charge,
)


# === MÉTADONNÉES ===
metadata = Base.metadata


# === FONCTIONS UTILITAIRES ===

def get_table_names() -> list[str]:
    """Retourne la liste des noms de toutes les tables."""
    return list(metadata.tables.keys())
