from Theme import DARK_PALETTE, LIGHT_PALETTE, EditorPalette, palette_for


def test_palettes_have_different_backgrounds() -> None:
    """Светлая и тёмная темы должны отличаться по фоновому цвету."""
    assert LIGHT_PALETTE.background != DARK_PALETTE.background


def test_palettes_have_basic_roles_filled() -> None:
    """В палитрах должны быть заданы все роли, которые использует подсветка."""
    for palette in (LIGHT_PALETTE, DARK_PALETTE):
        for role in ("foreground", "background", "keyword", "builtin", "comment",
                     "string", "number", "constant", "definition"):
            assert getattr(palette, role).isValid()


def test_default_palettes_do_not_share_colors() -> None:
    first = EditorPalette()
    second = EditorPalette()
    assert first.background is not second.background


def test_palette_for_theme_name() -> None:
    assert palette_for("light") is LIGHT_PALETTE
    assert palette_for("dark") is DARK_PALETTE
    assert palette_for("unknown") is DARK_PALETTE
