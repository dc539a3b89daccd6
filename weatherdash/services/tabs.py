"""Bottom tab navigation state."""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_TABS: tuple[tuple[str, str], ...] = (
    ("today", "Today"),
    ("hourly", "Hourly"),
    ("forecast", "5 Days"),
)

# Client-side delay before the incoming panel gets its animation class
ANIMATION_DELAY_MS = 10


@dataclass(frozen=True)
class TabState:
    tabs: tuple[tuple[str, str], ...] = DEFAULT_TABS
    active: str = DEFAULT_TABS[0][0]
    animate: bool = False

    @property
    def tab_ids(self) -> list[str]:
        return [tab_id for tab_id, _ in self.tabs]

    def switch(self, target: str) -> "TabState":
        if target not in self.tab_ids:
            raise ValueError(f"Unknown tab: {target}")
        return replace(self, active=target, animate=True)

    def is_active(self, tab_id: str) -> bool:
        return tab_id == self.active

    def panel_visible(self, tab_id: str) -> bool:
        return self.is_active(tab_id)


__all__ = ["ANIMATION_DELAY_MS", "DEFAULT_TABS", "TabState"]
