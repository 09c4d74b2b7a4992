"""
Tests du moniteur de stock.

Le moniteur publie via un FakePublisher qui enregistre les events :
on vérifie le déclenchement sur front (une seule alerte par transition).
"""

from __future__ import annotations

from vending.domain import events
from vending.domain.model import Machine, StockState
from vending.service_layer.monitor import MachineStockMonitor
from vending.service_layer.pubsub import AbstractPublishSubscribe


class FakePublisher(AbstractPublishSubscribe):
    """Capture les events publiés pour vérification dans les tests."""

    def __init__(self) -> None:
        self.published: list[events.Event] = []

    def publish(self, event: events.Event) -> None:
        self.published.append(event)

    def subscribe(self, type_tag, handler) -> None:
        pass

    def unsubscribe(self, type_tag, handler) -> None:
        pass


class TestPremièreObservation:
    def test_premier_contrôle_ok_publie_une_fois(self):
        """Le premier contrôle établit la référence : il publie même si le stock est ok."""
        publisher = FakePublisher()
        monitor = MachineStockMonitor(publisher)

        monitor.check_machine(Machine("001", 10))

        assert publisher.published == [events.StockLevelOk("001")]
        assert monitor.state_of("001") is StockState.OK

    def test_premier_contrôle_bas_publie_une_fois(self):
        publisher = FakePublisher()
        monitor = MachineStockMonitor(publisher)

        monitor.check_machine(Machine("001", 1))

        assert publisher.published == [events.LowStockWarning("001")]

    def test_état_inconnu_avant_tout_contrôle(self):
        assert MachineStockMonitor(FakePublisher()).state_of("001") is None


class TestDéclenchementSurFront:
    def test_une_alerte_par_transition(self):
        publisher = FakePublisher()
        monitor = MachineStockMonitor(publisher)
        machine = Machine("001", 10)

        for sold in (4, 4):  # 10 -> 6 -> 2
            machine.sell(sold)
            monitor.check_machine(machine)
        machine.refill(3)  # 2 -> 5
        monitor.check_machine(machine)
        machine.sell(1)  # 5 -> 4, toujours ok
        monitor.check_machine(machine)

        assert publisher.published == [
            events.StockLevelOk("001"),
            events.LowStockWarning("001"),
            events.StockLevelOk("001"),
        ]
        assert publisher.published.count(events.LowStockWarning("001")) == 1

    def test_rester_bas_ne_republie_pas(self):
        publisher = FakePublisher()
        monitor = MachineStockMonitor(publisher)
        machine = Machine("001", 2)

        monitor.check_machine(machine)
        machine.sell(5)
        monitor.check_machine(machine)

        assert publisher.published == [events.LowStockWarning("001")]
        assert monitor.state_of("001") is StockState.LOW

    def test_historique_indépendant_par_machine(self):
        publisher = FakePublisher()
        monitor = MachineStockMonitor(publisher)

        monitor.check_machine(Machine("001", 1))
        monitor.check_machine(Machine("002", 1))

        assert publisher.published == [
            events.LowStockWarning("001"),
            events.LowStockWarning("002"),
        ]
