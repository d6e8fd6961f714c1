"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import dirpurge.core.theme as theme_module
import pytest
from dirpurge.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_rich_theme,
    get_theme,
    load_theme,
)
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.header == "#69B9A1"
        assert colors.error == "#f53263"
        assert colors.trashed == "#faf870"

    def test_short_hex_accepted(self) -> None:
        """Three-digit hex codes are valid."""
        assert ThemeColors(size="#abc").size == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(deleted="ff0000")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(preserved="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(package_manual="#ffffff")  # type: ignore[call-arg]


class TestLoadTheme:
    """Tests for theme file loading."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """No override file means default colors."""
        assert load_theme(tmp_path / "none.toml") == ThemeColors()

    def test_partial_override(self, tmp_path: Path) -> None:
        """Only the given colors change."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntrashed = "#00ff00"\n')

        colors = load_theme(theme_file)

        assert colors.trashed == "#00ff00"
        assert colors.header == "#69B9A1"

    def test_invalid_override_falls_back(self, tmp_path: Path) -> None:
        """An invalid color makes the whole override fall back to defaults."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\nsize = "green"\n')

        assert load_theme(theme_file) == ThemeColors()

    def test_invalid_toml_ignored(self, tmp_path: Path) -> None:
        """Malformed TOML is ignored."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("invalid toml [[[")

        assert _load_toml_colors(theme_file) is None
        assert load_theme(theme_file) == ThemeColors()

    def test_user_theme_path_used_by_default(self, tmp_path: Path) -> None:
        """Without a path the user theme file is consulted."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\nheader = "#ff0000"\n')

        with patch("dirpurge.core.theme.get_user_theme_path", return_value=theme_file):
            colors = load_theme()

        assert colors.header == "#ff0000"


class TestGetRichTheme:
    """Tests for Rich theme generation."""

    def test_includes_outcome_styles(self) -> None:
        """Styles used by the cleanup output exist."""
        theme = get_rich_theme(ThemeColors())

        for name in ("deleted", "trashed", "preserved", "size", "path", "bold_header"):
            assert name in theme.styles

    def test_caches_theme(self) -> None:
        """get_theme returns the cached instance on subsequent calls."""
        theme_module._cached_theme = None

        theme1 = get_theme()
        theme2 = get_theme()

        assert isinstance(theme1, Theme)
        assert theme1 is theme2
