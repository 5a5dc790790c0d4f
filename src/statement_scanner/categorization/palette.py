"""
Fixed color palette for category labels.

Each entry carries the four display styles (background, text, border,
chart fill) as Tailwind-style class names.
"""
from typing import Dict

from statement_scanner.domain.models import CategoryColor

_PALETTE_ORDER = [
    "emerald", "green", "lime", "teal", "cyan", "sky", "blue", "indigo",
    "violet", "purple", "fuchsia", "pink", "rose", "red", "orange", "amber",
    "yellow", "slate", "gray", "zinc", "neutral", "stone",
]


def _make_color(color_id: str) -> CategoryColor:
    return CategoryColor(
        id=color_id,
        bg=f"bg-{color_id}-100",
        text=f"text-{color_id}-700",
        border=f"border-{color_id}-200",
        fill=f"bg-{color_id}-500",
    )


# Insertion order is the order in which unused colors are handed out
COLOR_PALETTE: Dict[str, CategoryColor] = {
    color_id: _make_color(color_id) for color_id in _PALETTE_ORDER
}

# Style for categories that are referenced but not registered
FALLBACK_COLOR = CategoryColor(
    id="fallback",
    bg="bg-slate-100",
    text="text-slate-700",
    border="border-slate-200",
    fill="bg-slate-400",
)


def get_color(color_id: str) -> CategoryColor:
    """
    Look up a palette entry.

    Raises:
        KeyError: If the id is not part of the palette
    """
    try:
        return COLOR_PALETTE[color_id]
    except KeyError:
        available = ', '.join(COLOR_PALETTE.keys())
        raise KeyError(
            f"Unknown palette color '{color_id}'. Available colors: {available}"
        ) from None
