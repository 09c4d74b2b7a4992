"""
Adapter pour les notifications.

Les subscribers d'alerte rapportent les changements de stock via ce
port, ce qui les découple du mécanisme de sortie concret.
"""

from __future__ import annotations

import abc
import logging

logger = logging.getLogger(__name__)


class AbstractNotifications(abc.ABC):
    """Interface abstraite pour les notifications."""

    @abc.abstractmethod
    def send(self, destination: str, message: str, level: int = logging.INFO) -> None:
        raise NotImplementedError


class LoggingNotifications(AbstractNotifications):
    """Implémentation concrète qui écrit les notifications dans les logs."""

    def send(self, destination: str, message: str, level: int = logging.INFO) -> None:
        logger.log(level, "[%s] %s", destination, message)
