"""
Fixtures pytest partagées pour les tests MediCabinet.

Ce module fournit :
- Une base de données SQLite en mémoire par test (rapide, isolée)
- Des fixtures pour créer des objets de test (utilisateurs de chaque rôle,
  patients, consultations, rendez-vous, charges)
- Des clients de test FastAPI avec authentification mockée par rôle
"""

import os

# Configuration de test, avant tout import de l'application
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET_KEY"] = "test-refresh-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, timedelta
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.auth.user_auth import get_current_user
from app.core.security import hash_password
from app.database.base import Base
from app.database.session import get_db
from app.main import app
from app.models import (
    Appointment,
    AppointmentStatus,
    CareEpisode,
    Charge,
    Patient,
    User,
    UserRole,
)
from app.models.patient.patient import PATIENT_SEQUENCE
from app.services.finance.periods import today
from app.services.sequence import next_value

TEST_PASSWORD = "MotDePasse123"


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """
    Engine SQLite en mémoire, recréé pour chaque test.

    StaticPool : une seule connexion partagée, la base en mémoire
    survit donc entre les sessions du test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_foreign_keys)

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Session configurée comme SessionLocal (pas d'autoflush, objets
    conservés après commit).
    """
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# MODEL FIXTURES - Utilisateurs
# =============================================================================

def make_user(db_session: Session, email: str, role: UserRole, **kwargs) -> User:
    user = User(
        email=email,
        password_hash=hash_password(kwargs.pop("password", TEST_PASSWORD)),
        first_name=kwargs.pop("first_name", "Test"),
        last_name=kwargs.pop("last_name", role.value.capitalize()),
        role=role,
        **kwargs,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def user_admin(db_session: Session) -> User:
    return make_user(db_session, "admin@cabinet.tn", UserRole.ADMIN, first_name="Amel", last_name="Admin")


@pytest.fixture
def user_medecin(db_session: Session) -> User:
    return make_user(db_session, "dr.trabelsi@cabinet.tn", UserRole.MEDECIN, first_name="Sami", last_name="Trabelsi")


@pytest.fixture
def user_assistant(db_session: Session) -> User:
    return make_user(db_session, "assistante@cabinet.tn", UserRole.ASSISTANT, first_name="Nour", last_name="Ben Ali")


# =============================================================================
# MODEL FIXTURES - Patients, consultations, rendez-vous, charges
# =============================================================================

def make_patient(db_session: Session, **kwargs) -> Patient:
    patient = Patient(
        sequence_id=next_value(db_session, PATIENT_SEQUENCE),
        last_name=kwargs.pop("last_name", "Mansour"),
        first_name=kwargs.pop("first_name", "Leila"),
        birth_date=kwargs.pop("birth_date", date(1985, 4, 12)),
        phone=kwargs.pop("phone", "+216 22 123 456"),
        **kwargs,
    )
    db_session.add(patient)
    db_session.commit()
    return patient


@pytest.fixture
def patient(db_session: Session) -> Patient:
    return make_patient(db_session)


@pytest.fixture
def other_patient(db_session: Session) -> Patient:
    return make_patient(db_session, last_name="Gharbi", first_name="Karim", phone="+216 98 765 432")


@pytest.fixture
def care_episode(db_session: Session, patient: Patient) -> CareEpisode:
    episode = CareEpisode(
        patient_id=patient.id,
        date=today(),
        tooth="36",
        description="Détartrage",
        billed_amount=Decimal("80.000"),
        received_amount=Decimal("50.000"),
    )
    db_session.add(episode)
    db_session.commit()
    db_session.refresh(patient)
    return episode


@pytest.fixture
def appointment(db_session: Session, patient: Patient, user_assistant: User) -> Appointment:
    appointment = Appointment(
        patient_id=patient.id,
        patient_display_name=patient.display_name,
        date=today() + timedelta(days=1),
        start_time="09:00",
        end_time="10:00",
        status=AppointmentStatus.SCHEDULED,
        reason="Contrôle",
        created_by=user_assistant.id,
    )
    db_session.add(appointment)
    db_session.commit()
    return appointment


@pytest.fixture
def charge(db_session: Session) -> Charge:
    charge = Charge(date=today(), reason="Loyer", amount=Decimal("600.000"))
    db_session.add(charge)
    db_session.commit()
    return charge


# =============================================================================
# API FIXTURES - Clients de test
# =============================================================================

def _client_as(db_session: Session, user: User | None) -> Generator[TestClient, None, None]:
    """
    Client de test FastAPI.

    1. Override get_db pour utiliser la base SQLite de test
    2. Override get_current_user (si un utilisateur est fourni) pour
       bypasser l'authentification JWT
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    if user is not None:
        app.dependency_overrides[get_current_user] = lambda: user

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def client(db_session: Session, user_admin: User) -> Generator[TestClient, None, None]:
    """Client authentifié en tant qu'administrateur."""
    yield from _client_as(db_session, user_admin)


@pytest.fixture
def client_medecin(db_session: Session, user_medecin: User) -> Generator[TestClient, None, None]:
    """Client authentifié en tant que médecin."""
    yield from _client_as(db_session, user_medecin)


@pytest.fixture
def client_assistant(db_session: Session, user_assistant: User) -> Generator[TestClient, None, None]:
    """Client authentifié en tant qu'assistant (droits restreints)."""
    yield from _client_as(db_session, user_assistant)


@pytest.fixture
def anonymous_client(db_session: Session) -> Generator[TestClient, None, None]:
    """Client sans authentification mockée (vrais tokens JWT)."""
    yield from _client_as(db_session, None)
