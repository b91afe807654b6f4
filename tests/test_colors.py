import pytest

from site_insight.analyzer.colors import (
    ColorEntry,
    ColorExtractor,
    extract_css_colors,
    extract_font_families,
    extract_palette,
    hex_to_rgb,
    normalize_hex,
)


STYLED = """<div style="color:#333333;background-color:#ffffff;font-family:'Roboto', sans-serif">Hi</div>"""


class TestExtractCssColors:
    def test_inline_colors_are_found(self):
        colors = extract_css_colors(STYLED)
        assert "#333333" in colors
        assert "#ffffff" in colors

    def test_formats_are_normalized(self):
        html = (
            '<p style="color: #ABC">a</p>'
            '<p style="background: rgb(255, 0, 0)">b</p>'
            '<p style="border: 1px solid navy">c</p>'
            '<p style="color: #11223344">d</p>'
        )
        assert extract_css_colors(html) == ["#aabbcc", "#ff0000", "#000080", "#112233"]

    def test_duplicates_kept_in_order(self):
        html = '<a style="color:#000000"></a><b style="color:#ffffff"></b><i style="color:#000000"></i>'
        assert extract_css_colors(html) == ["#000000", "#ffffff", "#000000"]

    def test_non_color_properties_are_ignored(self):
        html = '<div style="width: 100px; font-family: Arial; margin: 0 auto">x</div>'
        assert extract_css_colors(html) == []

    def test_hex_literals_in_any_property(self):
        html = '<div style="box-shadow:0 0 2px #123456;background-image:linear-gradient(#aaaaaa,#bbbbbb)">x</div>'
        assert extract_css_colors(html) == ["#123456", "#aaaaaa", "#bbbbbb"]

    def test_url_arguments_are_not_color_names(self):
        html = '<div style="background: url(red.png) #ffffff">x</div>'
        assert extract_css_colors(html) == ["#ffffff"]

    def test_quoted_strings_are_not_color_names(self):
        html = "<div style=\"background: url('navy/bg.png') white\">x</div>"
        assert extract_css_colors(html) == ["#ffffff"]

    def test_no_styles(self):
        assert extract_css_colors("<p>plain</p>") == []
        assert extract_css_colors("") == []

    def test_failures_return_empty_list(self):
        assert ColorExtractor().extract_css_colors(None) == []


class TestExtractFontFamilies:
    def test_primary_family_unquoted(self):
        assert "Roboto" in extract_font_families(STYLED)

    def test_style_blocks_and_duplicates(self):
        html = (
            "<style>body { font-family: \"Open Sans\", Arial; } h1 { font-family: Georgia }</style>"
            "<p style=\"font-family: 'Open Sans'\">x</p>"
        )
        assert extract_font_families(html) == ["Open Sans", "Georgia", "Open Sans"]

    def test_entity_quoted_family(self):
        html = '<p style="font-family:&quot;Open Sans&quot;, sans-serif">x</p>'
        assert extract_font_families(html) == ["Open Sans"]

    def test_failures_return_empty_list(self):
        assert extract_font_families(None) == []


class TestExtractPalette:
    def test_counts_and_usage(self):
        html = (
            '<div style="background-color:#ffffff;color:#333333"></div>'
            '<div style="background:#ffffff"></div>'
            '<div style="border-color:#ff0000"></div>'
        )
        palette = extract_palette(html)
        by_hex = {entry.hex: entry for entry in palette}

        assert [entry.hex for entry in palette] == ["#ffffff", "#333333", "#ff0000"]
        assert by_hex["#ffffff"].count == 2
        assert by_hex["#ffffff"].usage == "Background"
        assert by_hex["#ffffff"].name == "white"
        assert by_hex["#333333"].usage == "Text"
        assert by_hex["#333333"].name == "#333333"
        assert by_hex["#ff0000"].usage == "Border"

    def test_hex_outside_color_properties_is_other(self):
        palette = extract_palette('<div style="box-shadow:0 1px 2px #123456">x</div>')
        assert [(entry.hex, entry.usage) for entry in palette] == [("#123456", "Other")]


class TestColorEntry:
    def test_hex_is_lowercased(self):
        assert ColorEntry(name="x", hex="#AABBCC", usage="Text", count=1).hex == "#aabbcc"

    def test_invalid_hex_rejected(self):
        with pytest.raises(ValueError):
            ColorEntry(name="x", hex="#abc", usage="Text")

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            ColorEntry(name="x", hex="#aabbcc", usage="Text", count=-1)


def test_hex_helpers():
    assert normalize_hex("#FFF") == "#ffffff"
    assert normalize_hex("zzzzzz") is None
    assert hex_to_rgb("#102030") == (16, 32, 48)
    with pytest.raises(ValueError):
        hex_to_rgb("not-a-color")
