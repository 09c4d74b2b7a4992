"""
Bootstrap : assemblage de l'application (Composition Root).

Ce module construit un dispatcher, le moniteur de stock, et abonne
les quatre subscribers du domaine. Le dispatcher est un objet
explicite, jamais un singleton de module : chaque appel à
`bootstrap` produit une instance indépendante.
"""

from __future__ import annotations

from vending import config
from vending.adapters import notifications, repository
from vending.domain import events
from vending.service_layer import monitor, pubsub, subscribers


def bootstrap(
    machine_repository: repository.AbstractRepository,
    notifications_adapter: notifications.AbstractNotifications | None = None,
    isolate_failures: bool | None = None,
    settings: config.Settings | None = None,
) -> pubsub.PubSubService:
    """
    Construit et retourne un PubSubService configuré.

    En production, la politique d'erreur et la destination des alertes
    viennent de la configuration ; en test, on injecte des fakes.
    """
    if settings is None:
        settings = config.get_settings()
    if isolate_failures is None:
        isolate_failures = settings.isolate_failures

    if notifications_adapter is None:
        notifications_adapter = notifications.LoggingNotifications()

    service = pubsub.PubSubService(isolate_failures=isolate_failures)
    stock_monitor = monitor.MachineStockMonitor(service)
    destination = settings.alert_destination

    service.subscribe(
        events.MachineSale.type,
        subscribers.MachineSaleSubscriber(machine_repository, stock_monitor),
    )
    service.subscribe(
        events.MachineRefill.type,
        subscribers.MachineRefillSubscriber(machine_repository, stock_monitor),
    )
    service.subscribe(
        events.LowStockWarning.type,
        subscribers.LowStockWarningSubscriber(notifications_adapter, destination),
    )
    service.subscribe(
        events.StockLevelOk.type,
        subscribers.StockLevelOkSubscriber(notifications_adapter, destination),
    )
    return service
