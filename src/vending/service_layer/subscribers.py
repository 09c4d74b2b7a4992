"""
Subscribers du domaine.

- Subscribers de vente / réapprovisionnement : modifient le stock de la
  machine via le repository, puis délèguent au moniteur (peuvent échouer)
- Subscribers d'alerte : se contentent de rapporter (ne doivent pas échouer)
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

from vending import config
from vending.adapters import notifications as notifications_adapters
from vending.domain import events, model
from vending.service_layer.pubsub import Subscriber

if TYPE_CHECKING:
    from vending.adapters.repository import AbstractRepository
    from vending.service_layer.monitor import MachineStockMonitor

logger = logging.getLogger(__name__)

# --- Exceptions ---


class UnknownMachine(Exception):
    """Levée quand un event référence une machine absente du repository."""
    pass


def _get_machine(repository: AbstractRepository, machine_id: str) -> model.Machine:
    machine = repository.get(machine_id)
    if machine is None:
        raise UnknownMachine(f"Aucune machine avec l'id {machine_id}")
    return machine


# --- Subscribers de stock ---


class MachineSaleSubscriber(Subscriber):
    """Décrémente le stock de la quantité vendue."""

    def __init__(self, repository: AbstractRepository, monitor: MachineStockMonitor):
        self.repository = repository
        self.monitor = monitor

    def handle(self, event: events.MachineSale) -> None:
        machine = _get_machine(self.repository, event.machine_id)
        machine.sell(event.sold)
        logger.info(
            "Vente de %d sur la machine %s, stock=%d",
            event.sold, machine.id, machine.stock_level,
        )
        self.monitor.check_machine(machine)


class MachineRefillSubscriber(Subscriber):
    """Incrémente le stock de la quantité réapprovisionnée."""

    def __init__(self, repository: AbstractRepository, monitor: MachineStockMonitor):
        self.repository = repository
        self.monitor = monitor

    def handle(self, event: events.MachineRefill) -> None:
        machine = _get_machine(self.repository, event.machine_id)
        machine.refill(event.refilled)
        logger.info(
            "Réapprovisionnement de %d sur la machine %s, stock=%d",
            event.refilled, machine.id, machine.stock_level,
        )
        self.monitor.check_machine(machine)


# --- Subscribers d'alerte ---


class _AlertSubscriber(Subscriber):
    """
    Base des subscribers d'alerte.

    Aucun état, aucune publication : on rapporte via le port de
    notifications. Une notification qui échoue est loggée, jamais
    propagée.
    """

    level = logging.INFO

    def __init__(
        self,
        notifications: notifications_adapters.AbstractNotifications | None = None,
        destination: str = config.DEFAULT_ALERT_DESTINATION,
    ):
        if notifications is None:
            notifications = notifications_adapters.LoggingNotifications()
        self.notifications = notifications
        self.destination = destination

    @abc.abstractmethod
    def message(self, event: events.Event) -> str:
        raise NotImplementedError

    def handle(self, event: events.Event) -> None:
        try:
            self.notifications.send(self.destination, self.message(event), self.level)
        except Exception:
            logger.exception("Échec de la notification pour l'event %s", event)


class LowStockWarningSubscriber(_AlertSubscriber):
    level = logging.WARNING

    def message(self, event: events.Event) -> str:
        return f"Machine {event.machine_id} has low stock!"


class StockLevelOkSubscriber(_AlertSubscriber):
    def message(self, event: events.Event) -> str:
        return f"Machine {event.machine_id} stock level is okay."
