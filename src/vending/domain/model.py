"""
Modèle de domaine des distributeurs.

Une Machine est une entité mutable identifiée par son id ; son niveau
de stock est modifié en place par les subscribers de vente et de
réapprovisionnement. Aucun plancher n'est appliqué : le stock peut
devenir négatif si les ventes dépassent ce qui reste.
"""

from __future__ import annotations

import enum

# Politique fixe : en dessous de ce niveau, le stock est considéré bas.
LOW_STOCK_THRESHOLD = 3

DEFAULT_STOCK_LEVEL = 10


class StockState(str, enum.Enum):
    """Classification du stock d'une machine par le moniteur."""

    LOW = "low"
    OK = "ok"


def classify(stock_level: int) -> StockState:
    """Retourne LOW si le niveau est strictement sous le seuil, OK sinon."""
    if stock_level < LOW_STOCK_THRESHOLD:
        return StockState.LOW
    return StockState.OK


class Machine:
    """
    Entité représentant un distributeur.

    L'égalité et le hash sont basés sur l'identifiant, pas sur le
    niveau de stock : c'est la même machine avant et après une vente.
    """

    def __init__(self, id: str, stock_level: int = DEFAULT_STOCK_LEVEL):
        self.id = id
        self.stock_level = stock_level

    def __repr__(self) -> str:
        return f"<Machine {self.id} stock={self.stock_level}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Machine):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def stock_state(self) -> StockState:
        return classify(self.stock_level)

    def sell(self, quantity: int) -> None:
        self.stock_level -= quantity

    def refill(self, quantity: int) -> None:
        self.stock_level += quantity
