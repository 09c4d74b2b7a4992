"""
Events du domaine.

Les events représentent des faits qui se sont produits sur une machine.
Ils sont immuables et portent un tag de type (utilisé pour le routage)
ainsi que l'identifiant de la machine concernée.

Deux events sont "du même genre" si leurs tags sont égaux : le routage
ne regarde jamais la classe Python, seulement `type`.
"""

from dataclasses import dataclass
from typing import ClassVar


class Event:
    """Classe de base pour tous les events du domaine."""

    type: ClassVar[str] = ""
    machine_id: str


@dataclass(frozen=True)
class MachineSale(Event):
    """Des produits ont été vendus par une machine."""

    type: ClassVar[str] = "sale"

    sold: int
    machine_id: str


@dataclass(frozen=True)
class MachineRefill(Event):
    """Une machine a été réapprovisionnée."""

    type: ClassVar[str] = "refill"

    refilled: int
    machine_id: str


@dataclass(frozen=True)
class LowStockWarning(Event):
    """Le stock d'une machine vient de passer sous le seuil."""

    type: ClassVar[str] = "lowStockWarning"

    machine_id: str


@dataclass(frozen=True)
class StockLevelOk(Event):
    """Le stock d'une machine vient de repasser au-dessus du seuil."""

    type: ClassVar[str] = "stockLevelOk"

    machine_id: str
