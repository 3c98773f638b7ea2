"""
Dashboard stat cards.
"""

from typing import Sequence

from ..base import Component


class StatCards(Component):
    def __init__(self, items: Sequence[tuple[str, int]]):
        self.items = items

    def render(self) -> str:
        cards = "".join(
            f'<div class="card stat-card"><p class="stat-label">{self.escape(label)}</p>'
            f'<p class="stat-value">{int(value)}</p></div>'
            for label, value in self.items
        )
        return f'<section class="stat-grid" aria-label="Overview">{cards}</section>'
