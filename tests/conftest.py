"""
Configuration partagée pour les tests.

Le mapping ORM est démarré une seule fois pour toute la session de tests.
Les tests unitaires manipulent des Machine instrumentées sans session,
ce qui ne change rien à leur comportement.
"""

import pytest

from vending.adapters import orm


@pytest.fixture(scope="session", autouse=True)
def mappers():
    """Démarre le mapping ORM une fois pour toute la session."""
    orm.start_mappers()
