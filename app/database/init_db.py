"""
Initialisation de la base de données MediCabinet.
Crée les tables et le compte administrateur initial.
"""

import logging
import sys
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.database.base import Base, get_table_names
from app.database.session import engine, db_session, check_database_connection
from app.models import User, UserRole

logger = logging.getLogger(__name__)


# =============================================================================
# 1. CRÉATION DES TABLES
# =============================================================================

def create_all_tables() -> bool:
    """
    Crée toutes les tables de la base de données.

    Returns:
        True si succès, False sinon
    """
    try:
        logger.info("📦 Création des tables...")
        Base.metadata.create_all(bind=engine)
        table_names = get_table_names()
        logger.info(f"✅ {len(table_names)} tables : {', '.join(sorted(table_names))}")
        return True
    except Exception as e:
        logger.error(f"❌ Erreur lors de la création des tables : {e}")
        return False


def drop_all_tables() -> bool:
    """Supprime toutes les tables (ATTENTION : perte de données)."""
    try:
        logger.warning("🗑️ Suppression de toutes les tables...")
        Base.metadata.drop_all(bind=engine)
        return True
    except Exception as e:
        logger.error(f"❌ Erreur lors de la suppression des tables : {e}")
        return False


# =============================================================================
# 2. COMPTE ADMINISTRATEUR
# =============================================================================

def init_default_admin(
    db: Session,
    email: str,
    password: Optional[str],
) -> Optional[User]:
    """
    Crée le compte administrateur initial s'il n'existe pas.

    Returns:
        User existant ou créé, None si aucun mot de passe n'est configuré
    """
    logger.info("👤 Initialisation du compte administrateur...")
    email = email.lower()

    existing_admin = db.execute(
        select(User).where(func.lower(User.email) == email)
    ).scalar_one_or_none()
    if existing_admin:
        logger.info(f"   ℹ️ Admin {email} existe déjà")
        return existing_admin

    if not password:
        logger.warning("   ⚠️ FIRST_ADMIN_PASSWORD non défini, aucun admin créé")
        return None

    if len(password) < settings.PASSWORD_MIN_LENGTH:
        logger.error(
            f"   ❌ FIRST_ADMIN_PASSWORD trop court (min {settings.PASSWORD_MIN_LENGTH} caractères)"
        )
        return None

    admin_user = User(
        email=email,
        password_hash=hash_password(password),
        first_name="Admin",
        last_name="Cabinet",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db.add(admin_user)
    db.flush()

    logger.info(f"   ✅ Admin créé : {email}")
    return admin_user


# =============================================================================
# 3. INITIALISATION COMPLÈTE
# =============================================================================

def init_database(
    drop_existing: bool = False,
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> bool:
    """
    Initialise la base de données.

    Étapes :
    1. Vérifie la connexion
    2. (Optionnel) Supprime les tables existantes
    3. Crée toutes les tables
    4. Crée le compte administrateur
    """
    if not check_database_connection():
        logger.error("❌ Impossible de se connecter à la base de données")
        return False

    if drop_existing and not drop_all_tables():
        return False

    if not create_all_tables():
        return False

    with db_session() as db:
        init_default_admin(
            db,
            email=admin_email or settings.FIRST_ADMIN_EMAIL,
            password=admin_password or settings.FIRST_ADMIN_PASSWORD,
        )

    logger.info("🚀 Base initialisée. Prochaine étape : uvicorn app.main:app --reload")
    return True


# =============================================================================
# 4. POINT D'ENTRÉE CLI
# =============================================================================

def main():
    """
    Point d'entrée pour exécution en ligne de commande.

    Usage:
        python -m app.database.init_db
        python -m app.database.init_db --drop
    """
    import argparse

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description="Initialise la base de données MediCabinet")
    parser.add_argument(
        '--drop',
        action='store_true',
        help="Supprime les tables existantes avant création (ATTENTION !)"
    )
    parser.add_argument(
        '--admin-email',
        default=None,
        help=f"Email du compte administrateur (défaut: {settings.FIRST_ADMIN_EMAIL})"
    )

    args = parser.parse_args()

    if args.drop:
        print("\n⚠️  ATTENTION : Vous allez SUPPRIMER toutes les tables existantes !")
        response = input("Êtes-vous sûr ? (oui/non) : ")
        if response.lower() != 'oui':
            print("Annulé.")
            sys.exit(0)

    success = init_database(drop_existing=args.drop, admin_email=args.admin_email)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
