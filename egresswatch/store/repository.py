"""Relational schema and queries for external traffic intents."""

from datetime import date
from typing import List

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    and_,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine

from egresswatch.schemas import DedupKey, IntentRecord

metadata = MetaData()

external_traffic_intents = Table(
    "external_traffic_intents",
    metadata,
    # SQLite only autoincrements INTEGER primary keys
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
    Column("client_name", String(128), nullable=False),
    Column("client_namespace", String(128), nullable=False),
    Column("client_kind", String(128), nullable=False),
    Column("dns_name", String(128), nullable=False),
    Column("last_seen", Date, nullable=False),
    UniqueConstraint("client_name", "client_namespace", "client_kind", "dns_name", name="uniq_intent"),
)


def _matches(key: DedupKey):
    t = external_traffic_intents.c
    return and_(
        t.client_name == key.client_name,
        t.client_namespace == key.client_namespace,
        t.client_kind == key.client_kind,
        t.dns_name == key.dns_name,
    )


class IntentRepository:
    """Thin query layer over the intents table. Errors propagate to the caller."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def ensure_table(self) -> None:
        metadata.create_all(self.engine, tables=[external_traffic_intents], checkfirst=True)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(select(1))

    def exists(self, key: DedupKey) -> bool:
        stmt = select(external_traffic_intents.c.id).where(_matches(key)).limit(1)
        with self.engine.connect() as conn:
            return conn.execute(stmt).first() is not None

    def insert(self, key: DedupKey, last_seen: date) -> None:
        stmt = insert(external_traffic_intents).values(**key._asdict(), last_seen=last_seen)
        with self.engine.begin() as conn:
            conn.execute(stmt)

    def touch(self, key: DedupKey, last_seen: date) -> int:
        """Set last_seen for key. Returns the number of matched rows."""
        stmt = update(external_traffic_intents).where(_matches(key)).values(last_seen=last_seen)
        with self.engine.begin() as conn:
            return conn.execute(stmt).rowcount

    def delete_seen_before(self, cutoff: date) -> int:
        stmt = delete(external_traffic_intents).where(external_traffic_intents.c.last_seen < cutoff)
        with self.engine.begin() as conn:
            return conn.execute(stmt).rowcount

    def list_all(self) -> List[IntentRecord]:
        t = external_traffic_intents.c
        stmt = select(external_traffic_intents).order_by(t.last_seen.desc(), t.id)
        with self.engine.connect() as conn:
            return [IntentRecord(**row) for row in conn.execute(stmt).mappings()]

    def list_seen_between(self, start: date, end: date) -> List[IntentRecord]:
        t = external_traffic_intents.c
        stmt = select(external_traffic_intents).where(t.last_seen.between(start, end))
        with self.engine.connect() as conn:
            return [IntentRecord(**row) for row in conn.execute(stmt).mappings()]
