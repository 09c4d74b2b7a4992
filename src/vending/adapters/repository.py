"""
Pattern Repository.

Le repository fournit une abstraction sur le stockage des machines.
Il expose une interface de type collection (add, get, list) et
remet aux subscribers des références directes vers les machines :
les modifications faites sur une machine obtenue par `get` sont
visibles par tous ceux qui la consultent ensuite.
"""

from __future__ import annotations

import abc

from sqlalchemy.orm import Session

from vending.domain import model


class DuplicateMachine(Exception):
    """Levée quand on ajoute une machine dont l'id existe déjà."""
    pass


class AbstractRepository(abc.ABC):
    """
    Interface abstraite du repository.

    Les méthodes publiques vérifient les invariants (unicité des ids)
    puis délèguent aux méthodes abstraites préfixées _.
    """

    def add(self, machine: model.Machine) -> None:
        """Ajoute une machine ; son id doit être unique."""
        if self._get(machine.id) is not None:
            raise DuplicateMachine(f"Machine déjà enregistrée : {machine.id}")
        self._add(machine)

    def get(self, machine_id: str) -> model.Machine | None:
        """Retourne la machine d'id donné, ou None si elle est inconnue."""
        return self._get(machine_id)

    def list(self) -> list[model.Machine]:
        """Retourne un instantané de la liste des machines."""
        return list(self._list())

    @abc.abstractmethod
    def _add(self, machine: model.Machine) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def _get(self, machine_id: str) -> model.Machine | None:
        raise NotImplementedError

    @abc.abstractmethod
    def _list(self) -> list[model.Machine]:
        raise NotImplementedError


class InMemoryRepository(AbstractRepository):
    """Repository en mémoire, adossé à une simple liste."""

    def __init__(self, machines: list[model.Machine] | None = None):
        self._machines: list[model.Machine] = []
        for machine in machines or []:
            self.add(machine)

    def _add(self, machine: model.Machine) -> None:
        self._machines.append(machine)

    def _get(self, machine_id: str) -> model.Machine | None:
        return next((m for m in self._machines if m.id == machine_id), None)

    def _list(self) -> list[model.Machine]:
        return self._machines


class SqlAlchemyRepository(AbstractRepository):
    """
    Implémentation concrète du repository avec SQLAlchemy.

    La session garde une identity map : deux `get` du même id renvoient
    le même objet, et les mutations faites par les subscribers sont
    écrites en base au commit de la session (à la charge de l'appelant).
    """

    def __init__(self, session: Session):
        self.session = session

    def _add(self, machine: model.Machine) -> None:
        self.session.add(machine)

    def _get(self, machine_id: str) -> model.Machine | None:
        return self.session.get(model.Machine, machine_id)

    def _list(self) -> list[model.Machine]:
        return (
            self.session.query(model.Machine)
            .order_by(model.Machine.id)
            .all()
        )
