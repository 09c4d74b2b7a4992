"""
Mapping ORM avec SQLAlchemy (classical mapping).

On définit la table séparément, puis on mappe la classe Machine
du domaine sur cette table. Le modèle de domaine reste ainsi
ignorant de la persistance.
"""

from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import registry, sessionmaker
from sqlalchemy.pool import StaticPool

from vending.domain import model

metadata = MetaData()
mapper_registry = registry(metadata=metadata)

machines = Table(
    "machines",
    metadata,
    Column("machine_id", String(255), primary_key=True),
    Column("stock_level", Integer, nullable=False),
)


def start_mappers() -> None:
    """
    Configure le mapping entre Machine et la table `machines`.

    Idempotent : un second appel ne refait pas le mapping.
    """
    if sa_inspect(model.Machine, raiseerr=False) is not None:
        return
    mapper_registry.map_imperatively(
        model.Machine,
        machines,
        properties={
            "id": machines.c.machine_id,
        },
    )


def make_session_factory(uri: str) -> sessionmaker:
    """
    Crée l'engine, les tables, et retourne une fabrique de sessions.

    Pour SQLite en mémoire, une StaticPool garantit que toutes les
    sessions partagent la même connexion (donc la même base).
    """
    if uri in ("sqlite://", "sqlite:///:memory:"):
        engine = create_engine(
            uri,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(uri)
    metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
