"""
Source d'events pour piloter le système.

Deux façons de produire des events à injecter dans le dispatcher :
- `random_events` : génération aléatoire (simulation de trafic)
- `parse_event` : lecture d'une description textuelle `type:machine:quantité`
"""

from __future__ import annotations

import random
from typing import Iterator, Sequence

from vending.domain import events

SALE_QUANTITIES = (7, 10)
REFILL_QUANTITIES = (3, 5)


def random_events(
    count: int,
    machine_ids: Sequence[str],
    rng: random.Random | None = None,
) -> Iterator[events.Event]:
    """
    Génère `count` events de vente ou de réapprovisionnement.

    Une chance sur deux d'avoir une vente (7 ou 10 unités), sinon un
    réapprovisionnement (3 ou 5 unités), sur une machine tirée au hasard.
    """
    if not machine_ids:
        raise ValueError("Au moins une machine est nécessaire")
    rng = rng or random.Random()
    for _ in range(count):
        machine_id = rng.choice(machine_ids)
        if rng.random() < 0.5:
            yield events.MachineSale(rng.choice(SALE_QUANTITIES), machine_id)
        else:
            yield events.MachineRefill(rng.choice(REFILL_QUANTITIES), machine_id)


def parse_event(text: str) -> events.Event:
    """
    Parse "sale:001:8" ou "refill:001:5" en event.

    Lève ValueError si le format, le type ou la quantité est invalide.
    """
    parts = text.split(":")
    if len(parts) != 3:
        raise ValueError(f"Format attendu type:machine:quantité, reçu {text!r}")
    kind, machine_id, raw_qty = (p.strip() for p in parts)
    if not machine_id:
        raise ValueError(f"Identifiant de machine manquant dans {text!r}")
    try:
        qty = int(raw_qty)
    except ValueError:
        raise ValueError(f"Quantité invalide dans {text!r}") from None
    if qty < 0:
        raise ValueError(f"Quantité négative dans {text!r}")

    if kind == events.MachineSale.type:
        return events.MachineSale(qty, machine_id)
    if kind == events.MachineRefill.type:
        return events.MachineRefill(qty, machine_id)
    raise ValueError(f"Type d'event inconnu : {kind!r}")
