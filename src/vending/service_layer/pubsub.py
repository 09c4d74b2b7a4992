"""
Service de publication / abonnement.

Le dispatcher est le point central de routage des events vers
leurs subscribers, par tag de type.

Fonctionnement :
1. Un subscriber s'abonne à un tag (`subscribe`)
2. Un event est publié (`publish`)
3. Chaque subscriber abonné au tag de l'event est appelé, dans l'ordre
   d'abonnement, de façon synchrone sur la pile de l'appelant

Un subscriber peut lui-même publier : l'event imbriqué est entièrement
traité (en profondeur d'abord) avant de passer au subscriber suivant.
Un event sans abonné est ignoré silencieusement.
"""

from __future__ import annotations

import abc
import logging

from vending.domain import events

logger = logging.getLogger(__name__)


class InvalidEvent(ValueError):
    """Levée quand un event publié n'a pas de tag ou pas d'id de machine."""
    pass


class Subscriber(abc.ABC):
    """Contrat d'un subscriber : traiter un event d'un type auquel il est abonné."""

    @abc.abstractmethod
    def handle(self, event: events.Event) -> None:
        raise NotImplementedError


class AbstractPublishSubscribe(abc.ABC):
    """Interface abstraite du dispatcher."""

    @abc.abstractmethod
    def publish(self, event: events.Event) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def subscribe(self, type_tag: str, handler: Subscriber) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def unsubscribe(self, type_tag: str, handler: Subscriber) -> None:
        raise NotImplementedError


class PubSubService(AbstractPublishSubscribe):
    """
    Dispatcher synchrone à registre plat : tag -> liste de subscribers.

    Politique d'erreur choisie à la construction :
    - isolate_failures=False (défaut) : l'exception d'un subscriber remonte
      immédiatement à l'appelant de `publish`, les subscribers suivants
      ne sont pas appelés
    - isolate_failures=True : l'erreur est loggée et enregistrée dans
      `failures`, puis la distribution continue

    `failures` s'accumule sur toute la vie de l'instance ; `clear_failures`
    le vide et retourne ce qui avait été enregistré.
    """

    def __init__(self, isolate_failures: bool = False):
        self.isolate_failures = isolate_failures
        self.failures: list[tuple[events.Event, Subscriber, Exception]] = []
        self._registry: dict[str, list[Subscriber]] = {}

    def subscribe(self, type_tag: str, handler: Subscriber) -> None:
        """Ajoute un subscriber en fin de liste (les doublons sont permis)."""
        if not isinstance(type_tag, str) or not type_tag.strip():
            raise ValueError("type_tag doit être une chaîne non vide")
        self._registry.setdefault(type_tag, []).append(handler)

    def unsubscribe(self, type_tag: str, handler: Subscriber) -> None:
        """
        Retire toutes les occurrences de `handler` pour ce tag.

        La comparaison se fait par identité : deux subscribers égaux
        mais distincts ne sont pas confondus. Sans effet si le tag ou
        le subscriber est absent.
        """
        handlers = self._registry.get(type_tag)
        if handlers is None:
            return
        remaining = [h for h in handlers if h is not handler]
        if remaining:
            self._registry[type_tag] = remaining
        else:
            del self._registry[type_tag]

    def subscribers(self, type_tag: str) -> tuple[Subscriber, ...]:
        return tuple(self._registry.get(type_tag, ()))

    def clear_failures(self) -> list[tuple[events.Event, Subscriber, Exception]]:
        failures, self.failures = self.failures, []
        return failures

    def publish(self, event: events.Event) -> None:
        """
        Distribue l'event à tous les subscribers de son tag.

        On itère sur une copie de la liste : un (dés)abonnement fait
        pendant la distribution ne vaut que pour les publications suivantes.
        """
        if not event.type or not getattr(event, "machine_id", None):
            raise InvalidEvent(f"Event mal formé : {event!r}")

        handlers = list(self._registry.get(event.type, []))
        if not handlers:
            logger.debug("Aucun subscriber pour l'event %s", event)
            return

        for handler in handlers:
            logger.debug("Traitement de l'event %s avec %s", event, handler)
            if not self.isolate_failures:
                handler.handle(event)
                continue
            try:
                handler.handle(event)
            except Exception as exc:
                logger.exception("Erreur lors du traitement de l'event %s", event)
                self.failures.append((event, handler, exc))
