import random
from typing import Any, Dict, Iterator, List, Optional, Union

from statement_scanner.categorization.palette import COLOR_PALETTE, FALLBACK_COLOR, get_color
from statement_scanner.config.settings import ConfigLoader
from statement_scanner.domain.models import CategoryColor, CategoryConfig
from statement_scanner.logging_setup import get_logger

logger = get_logger(__name__)


class CategoryRegistry:
    """
    Ordered set of known categories and their display colors.

    Categories can be added and recolored, never removed. Rules and
    transactions may still reference names that are not registered here;
    those get the fallback style from `color_for`.

    Usage:
        registry = CategoryRegistry.from_config()
        registry.add_category("Pets")
        registry.set_color("Pets", "lime")
    """

    def __init__(
        self,
        categories: Optional[List[CategoryConfig]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            categories: Initial categories, in display order
            rng: Random source used when every palette color is taken
        """
        self._categories: List[CategoryConfig] = []
        self._rng = rng or random.Random()

        for config in categories or []:
            if self.get(config.name) is None:
                self._categories.append(config)

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[random.Random] = None,
    ) -> "CategoryRegistry":
        """
        Build the registry from a categories config.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Format: `{"categories": [{"name": "Groceries", "color": "emerald"}]}`
            rng: Optional random source

        Raises:
            KeyError: If a category references an unknown palette color
        """
        if config is None:
            config = ConfigLoader.load_categories_config()

        categories = [
            CategoryConfig(name=entry["name"], color=get_color(entry["color"]))
            for entry in config.get("categories", [])
        ]
        return cls(categories, rng=rng)

    @property
    def categories(self) -> List[CategoryConfig]:
        return list(self._categories)

    @property
    def names(self) -> List[str]:
        return [c.name for c in self._categories]

    def get(self, name: str) -> Optional[CategoryConfig]:
        for config in self._categories:
            if config.name == name:
                return config
        return None

    def color_for(self, name: str) -> CategoryColor:
        """Color of a category, or the fallback style for unregistered names"""
        config = self.get(name)
        return config.color if config else FALLBACK_COLOR

    def _next_color(self) -> CategoryColor:
        used = {c.color.id for c in self._categories}
        for color in COLOR_PALETTE.values():
            if color.id not in used:
                return color
        return self._rng.choice(list(COLOR_PALETTE.values()))

    def add_category(self, name: str) -> Optional[CategoryConfig]:
        """
        Register a new category.

        No-op for an empty name or a name that already exists (exact,
        case-sensitive match).

        Returns:
            The new config, or None if nothing was added
        """
        if not name or self.get(name) is not None:
            return None

        config = CategoryConfig(name=name, color=self._next_color())
        self._categories.append(config)
        logger.debug("Added category %r with color %s", name, config.color.id)
        return config

    def set_color(self, name: str, color: Union[CategoryColor, str]) -> bool:
        """
        Replace the color of a category.

        Args:
            name: Category name
            color: A CategoryColor or a palette id

        Returns:
            True if the category exists and was updated

        Raises:
            KeyError: If color is a palette id that doesn't exist
        """
        if isinstance(color, str):
            color = get_color(color)

        for index, config in enumerate(self._categories):
            if config.name == name:
                self._categories[index] = CategoryConfig(name=name, color=color)
                return True
        return False

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[CategoryConfig]:
        return iter(list(self._categories))

    def __len__(self) -> int:
        return len(self._categories)

    def __repr__(self) -> str:
        return f"CategoryRegistry({len(self._categories)} categories)"
