"""Closed vocabularies for poem styles and visual themes."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class PoemStyle(str, Enum):
    """Structural form the generated poem must follow."""

    FREE_VERSE = "Free Verse"
    HAIKU = "Haiku"
    SONNET = "Sonnet"
    LIMERICK = "Limerick"
    ODE = "Ode"


class VisualTheme(str, Enum):
    """Cosmetic theme applied to the compose and library screens."""

    SERENE = "Serene"
    MIDNIGHT = "Midnight"
    PARCHMENT = "Parchment"
    WATERCOLOR = "Watercolor"


DEFAULT_STYLE = PoemStyle.FREE_VERSE
DEFAULT_THEME = VisualTheme.SERENE

# Serene is the base stylesheet and needs no extra class.
THEME_CLASSES: Dict[VisualTheme, str] = {
    VisualTheme.SERENE: "",
    VisualTheme.MIDNIGHT: "theme-midnight",
    VisualTheme.PARCHMENT: "theme-parchment",
    VisualTheme.WATERCOLOR: "theme-watercolor",
}
