"""
Ecriture idempotente par lots : upsert sur (user_id, date).

Chaque lot est un appel independant (commit par lot). Un echec interrompt le
run et indique le lot fautif ainsi que le nombre de lots deja commites.
"""
import logging
from typing import Any, Dict, Sequence, Type

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, SQLModel

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 500
CONFLICT_KEYS = ("user_id", "date")
# Conserves tels quels lors d'une mise a jour
INSERT_ONLY_COLUMNS = ("id", "created_at")


class BatchWriteError(Exception):
    """Echec d'un lot d'upsert."""

    def __init__(self, table: str, chunk_index: int, committed_chunks: int, rows_committed: int, cause: Exception):
        self.table = table
        self.chunk_index = chunk_index
        self.committed_chunks = committed_chunks
        self.rows_committed = rows_committed
        self.cause = cause
        super().__init__(
            f"Upsert {table} echoue au lot {chunk_index} "
            f"({committed_chunks} lots deja commites): {cause}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "failed_chunk": self.chunk_index,
            "committed_chunks": self.committed_chunks,
            "rows_committed": self.rows_committed,
        }


def _insert_for(session: Session):
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise ValueError(f"Dialecte non supporte pour l'upsert: {dialect}")


def upsert_rows(
    session: Session,
    model: Type[SQLModel],
    rows: Sequence[Dict[str, Any]],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Upsert rows dans la table de model par lots de chunk_size. Retourne le nombre de lots."""
    table = model.__table__
    if not rows:
        return 0

    insert = _insert_for(session)
    committed = 0
    rows_committed = 0
    for index, start in enumerate(range(0, len(rows), chunk_size)):
        chunk = list(rows[start:start + chunk_size])
        stmt = insert(table).values(chunk)
        update_cols = {
            col: stmt.excluded[col]
            for col in chunk[0]
            if col not in CONFLICT_KEYS and col not in INSERT_ONLY_COLUMNS
        }
        stmt = stmt.on_conflict_do_update(index_elements=list(CONFLICT_KEYS), set_=update_cols)
        try:
            session.execute(stmt)
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Upsert {table.name}: lot {index} en echec ({len(chunk)} lignes): {e}")
            raise BatchWriteError(table.name, index, committed, rows_committed, e) from e
        committed += 1
        rows_committed += len(chunk)
        logger.debug(f"Upsert {table.name}: lot {index} commite ({len(chunk)} lignes)")

    logger.info(f"Upsert {table.name}: {rows_committed} lignes en {committed} lots")
    return committed
