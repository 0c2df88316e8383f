"""Presentation variants of the dashboard and editor"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

from ..config import ClientSettings

LAYOUTS = ("table", "card")

# ANSI colour codes per theme
THEMES: Dict[str, Dict[str, str]] = {
    "light": {"active": "\033[32m", "paused": "\033[90m", "heading": "\033[1m", "error": "\033[31m", "reset": "\033[0m"},
    "dark": {"active": "\033[92m", "paused": "\033[37m", "heading": "\033[1;97m", "error": "\033[91m", "reset": "\033[0m"},
}


@dataclass(frozen=True)
class ViewConfig:
    layout: str = "table"
    theme: str = "light"
    load_latest_when_no_id: bool = False
    allow_playbook_delete: bool = False
    palette: Dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.layout not in LAYOUTS:
            raise ValueError(f"Unknown layout '{self.layout}'")
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme '{self.theme}'")
        object.__setattr__(self, "palette", THEMES[self.theme])

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "ViewConfig":
        return cls(
            layout=settings.layout,
            theme=settings.theme,
            load_latest_when_no_id=settings.load_latest_when_no_id,
        )

    def paint(self, key: str, text: str) -> str:
        return f"{self.palette[key]}{text}{self.palette['reset']}"
