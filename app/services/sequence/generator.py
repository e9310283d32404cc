"""
Générateur de séquences nommées (compteurs atomiques).

Chaque appel à next_value() exécute une seule instruction
"incrémente et renvoie la nouvelle valeur" sur la ligne du compteur :

    INSERT INTO counters (name, value) VALUES (:name, 1)
    ON CONFLICT (name) DO UPDATE SET value = counters.value + 1
    RETURNING value

La ligne est créée au premier appel (qui renvoie 1). Deux appels
concurrents sur le même compteur sont sérialisés par le verrou de ligne
(PostgreSQL) ou le verrou d'écriture de la base (SQLite) : ils ne
peuvent pas obtenir la même valeur.

L'incrément fait partie de la transaction de l'appelant : si la création
de l'enregistrement numéroté échoue et que la transaction est annulée,
l'incrément l'est aussi.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.sequence.counter import Counter

logger = logging.getLogger(__name__)


# Dialectes supportant INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_BUILDERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def next_value(db: Session, counter_name: str) -> int:
    """
    Incrémente le compteur et renvoie la nouvelle valeur.

    Args:
        db: Session SQLAlchemy (transaction de l'appelant)
        counter_name: Nom de la séquence (ex: "patientId")

    Returns:
        Nouvelle valeur, strictement supérieure à toutes celles déjà
        renvoyées pour ce compteur

    Raises:
        SQLAlchemyError: Erreur de la base (propagée à l'appelant)
    """
    builder = _UPSERT_BUILDERS.get(db.get_bind().dialect.name)

    if builder is not None:
        stmt = builder(Counter).values(name=counter_name, value=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Counter.name],
            set_={"value": Counter.value + 1},
        ).returning(Counter.value)
        value = db.execute(stmt).scalar_one()
    else:
        value = _next_value_fallback(db, counter_name)

    logger.debug(f"🔢 Séquence '{counter_name}' -> {value}")
    return value


def _next_value_fallback(db: Session, counter_name: str) -> int:
    """UPDATE ... RETURNING, puis création de la ligne si elle n'existe pas."""
    increment = (
        update(Counter)
        .where(Counter.name == counter_name)
        .values(value=Counter.value + 1)
        .returning(Counter.value)
    )

    value = db.execute(increment).scalar_one_or_none()
    if value is not None:
        return value

    try:
        with db.begin_nested():
            db.add(Counter(name=counter_name, value=1))
        return 1
    except IntegrityError:
        # Créé entre-temps par un appel concurrent
        return db.execute(increment).scalar_one()


def current_value(db: Session, counter_name: str) -> int:
    """Dernière valeur distribuée (0 si le compteur n'existe pas encore)."""
    value = db.execute(
        select(Counter.value).where(Counter.name == counter_name)
    ).scalar_one_or_none()
    return value or 0
