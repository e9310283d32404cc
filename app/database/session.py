"""
Configuration de la session SQLAlchemy
Fournit l'engine, la factory de sessions, et la dependency FastAPI
"""
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator, Optional
import logging

from app.core.config import settings

# Logger pour debugging des connexions
logger = logging.getLogger(__name__)


# === 1. ENGINE ===
#
# PostgreSQL en production (pool de connexions), SQLite accepté pour le
# développement local et les tests.

def _engine_options() -> dict:
    """Options de création de l'engine selon le dialecte."""
    if settings.is_sqlite:
        return {
            "connect_args": {"check_same_thread": False},
            "echo": False,
        }

    return {
        # === Pool de connexions ===
        "pool_size": 5,              # Nombre de connexions permanentes
        "max_overflow": 10,          # Connexions supplémentaires si besoin (temporaires)
        "pool_timeout": 30,          # Timeout pour obtenir une connexion (secondes)
        "pool_recycle": 1800,        # Recycler les connexions après 30 min
        "pool_pre_ping": True,       # Vérifier que la connexion est vivante avant utilisation
        "echo": settings.DEBUG and settings.is_development,  # Log SQL en dev uniquement
        # === Paramètres PostgreSQL ===
        "connect_args": {
            "application_name": "medicabinet",  # Identifie l'app dans pg_stat_activity
            "options": "-c timezone=UTC",
        },
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options())


# === 2. SESSION LOCAL (Factory de sessions) ===

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,         # Pas de commit automatique (on contrôle explicitement)
    autoflush=False,          # Pas de flush automatique (meilleur contrôle)
    expire_on_commit=False,   # Garder les objets accessibles après commit
)


# === 3. DEPENDENCY FASTAPI ===

def get_db() -> Generator[Session, None, None]:
    """
    Fournit une session par requête.

    Les services commitent eux-mêmes leurs écritures ; toute exception
    remontée pendant la requête provoque un rollback de ce qui n'a pas
    été validé.

    Usage:
        @router.get("/patients")
        def list_patients(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


class db_session:
    """
    Context manager pour utiliser une session hors FastAPI.

    Gère automatiquement le commit/rollback et la fermeture.

    Usage:
        with db_session() as db:
            db.add(user)
            # Commit automatique si pas d'erreur
    """

    def __init__(self, commit_on_exit: bool = True):
        """
        Args:
            commit_on_exit: Si True, commit automatiquement à la sortie (si pas d'erreur)
        """
        self.db: Optional[Session] = None
        self.commit_on_exit = commit_on_exit

    def __enter__(self) -> Session:
        self.db = SessionLocal()
        return self.db

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None and self.commit_on_exit:
                self.db.commit()
            else:
                self.db.rollback()
        finally:
            self.db.close()

        # Ne pas supprimer l'exception (la propager)
        return False


# === 4. VÉRIFICATION DE CONNEXION ===

def check_database_connection() -> bool:
    """
    Vérifie que la connexion à la base de données fonctionne.

    Utile pour les health checks et le démarrage de l'application.

    Returns:
        True si la connexion est OK, False sinon
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Erreur de connexion à la base de données : {e}")
        return False


# === 5. EVENT LISTENERS ===

if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        """SQLite n'applique les ON DELETE CASCADE qu'avec foreign_keys=ON"""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
