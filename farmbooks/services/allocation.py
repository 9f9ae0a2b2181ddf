from dataclasses import dataclass
from typing import Sequence

from farmbooks.db import models


@dataclass(frozen=True)
class Allocation:
    party_id: int
    percentage: float


def allocate_equally(parties: Sequence[models.Party]) -> list[Allocation]:
    """
    Split a bill evenly between saved parties, as percentages of the total.
    """
    party_ids = [party.id for party in parties if party.id is not None]
    if not party_ids:
        return []
    percentage = 100 / len(party_ids)
    return [Allocation(party_id=party_id, percentage=percentage) for party_id in party_ids]
