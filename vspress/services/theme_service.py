"""
Light/dark theme preference
"""

from typing import Optional

from vspress.models.context import PressContext

THEMES = ("light", "dark")


def resolve_theme(saved: Optional[str], color_scheme_hint: Optional[str]) -> str:
    """
    Pick the theme for a request

    Args:
        saved: Persisted preference (theme cookie)
        color_scheme_hint: Value of the Sec-CH-Prefers-Color-Scheme client hint

    Returns:
        "light" or "dark"
    """
    if saved in THEMES:
        return saved
    if color_scheme_hint and color_scheme_hint.strip('" ').lower() == "dark":
        return "dark"
    return "light"


def toggle_theme(ctx: PressContext) -> str:
    ctx.theme = "dark" if ctx.theme == "light" else "light"
    return ctx.theme
