"""
Point d'entrée en ligne de commande.

La CLI est un thin adapter : elle lit la configuration, prépare le
repository, assemble le dispatcher via bootstrap, puis publie les
events (scriptés ou aléatoires). Elle ne contient aucune logique métier.
"""

from __future__ import annotations

import logging
import random

import click
from pydantic import ValidationError
from sqlalchemy.orm import Session

from vending import config
from vending.adapters import event_source, orm, repository
from vending.domain import model
from vending.service_layer import bootstrap, subscribers

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _parse_event_specs(ctx, param, values):
    try:
        return [event_source.parse_event(v) for v in values]
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _default_isolate_failures() -> bool:
    return click.get_current_context().find_object(config.Settings).isolate_failures


def _open_session(settings: config.Settings) -> Session:
    orm.start_mappers()
    return orm.make_session_factory(settings.database_uri)()


def _seeded_repository(
    session: Session, settings: config.Settings
) -> repository.SqlAlchemyRepository:
    repo = repository.SqlAlchemyRepository(session)
    for machine_id in settings.machine_ids:
        if repo.get(machine_id) is None:
            repo.add(model.Machine(machine_id, settings.initial_stock))
    session.commit()
    return repo


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Niveau de log (défaut : VENDING_LOG_LEVEL ou INFO).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Suivi du stock d'un parc de distributeurs."""
    try:
        settings = config.get_settings()
    except ValidationError as e:
        raise click.UsageError(f"Configuration invalide :\n{e}") from e
    ctx.obj = settings

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--count", default=5, show_default=True, help="Nombre d'events aléatoires.")
@click.option("--seed", type=int, default=None, help="Graine du générateur aléatoire.")
@click.option(
    "--event",
    "scripted",
    multiple=True,
    callback=_parse_event_specs,
    help="Event scripté type:machine:quantité (répétable), remplace les events aléatoires.",
)
@click.option(
    "--isolate-failures/--propagate-failures",
    default=_default_isolate_failures,
    help="Politique d'erreur du dispatcher (défaut : VENDING_ISOLATE_FAILURES).",
)
@click.pass_obj
def simulate(
    settings: config.Settings,
    count: int,
    seed: int | None,
    scripted,
    isolate_failures: bool,
) -> None:
    """Publie des events de vente / réapprovisionnement et affiche les stocks."""
    with _open_session(settings) as session:
        repo = _seeded_repository(session, settings)
        service = bootstrap.bootstrap(
            repo, isolate_failures=isolate_failures, settings=settings
        )

        if scripted:
            to_publish = scripted
        else:
            machine_ids = [m.id for m in repo.list()]
            to_publish = list(
                event_source.random_events(count, machine_ids, random.Random(seed))
            )

        try:
            for event in to_publish:
                service.publish(event)
        except subscribers.UnknownMachine as e:
            session.rollback()
            raise click.ClickException(str(e)) from e
        session.commit()

        for machine in repo.list():
            click.echo(f"{machine.id}\t{machine.stock_level}\t{machine.stock_state.value}")


@cli.command()
@click.pass_obj
def machines(settings: config.Settings) -> None:
    """Affiche les machines configurées et leur stock initial."""
    with _open_session(settings) as session:
        for machine in _seeded_repository(session, settings).list():
            click.echo(f"{machine.id}\t{machine.stock_level}")


if __name__ == "__main__":
    cli()
