"""
Moniteur de stock.

Le moniteur observe les machines après chaque vente ou
réapprovisionnement et publie un event dérivé (LowStockWarning ou
StockLevelOk) uniquement quand la classification du stock change :
la notification est déclenchée sur front, pas sur niveau.

Le tout premier contrôle d'une machine publie toujours un event,
puisqu'aucune classification n'est encore connue : il établit la
référence de départ.
"""

from __future__ import annotations

import logging

from vending.domain import events, model
from vending.service_layer.pubsub import AbstractPublishSubscribe

logger = logging.getLogger(__name__)


class MachineStockMonitor:
    def __init__(self, publisher: AbstractPublishSubscribe):
        self.publisher = publisher
        self._stock_state: dict[str, model.StockState] = {}

    def state_of(self, machine_id: str) -> model.StockState | None:
        """Dernière classification connue, None si jamais observée."""
        return self._stock_state.get(machine_id)

    def check_machine(self, machine: model.Machine) -> None:
        previous = self._stock_state.get(machine.id)
        current = model.classify(machine.stock_level)
        logger.debug(
            "Machine %s : état précédent=%s, état courant=%s",
            machine.id, previous, current,
        )
        if previous == current:
            return

        if current is model.StockState.LOW:
            self.publisher.publish(events.LowStockWarning(machine.id))
        else:
            self.publisher.publish(events.StockLevelOk(machine.id))
        self._stock_state[machine.id] = current
