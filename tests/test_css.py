"""Tests for CSS custom-property serialization."""

import re

import pytest

from livery import (
    CssVariableOptions,
    Schema,
    create_css_var_helper,
    create_schema,
    css_var,
    escape_css_value,
    merge,
    needs_css_escaping,
    t,
    to_css_string,
    to_css_string_all,
    to_css_variables,
)


class TestToCssVariables:
    """Tests for to_css_variables()."""

    def test_flattens_in_schema_order(self, schema: Schema) -> None:
        variables = to_css_variables(schema, schema.defaults())
        assert list(variables.items()) == [
            ("--brand-primary", "#3b82f6"),
            ("--brand-secondary", "#64748b"),
            ("--spacing-sm", "0.5rem"),
            ("--spacing-md", "1rem"),
            ("--typography-font-family", "Inter, sans-serif"),
            ("--typography-scale", "1.25"),
        ]

    def test_order_independent_of_theme_dict_order(self, schema: Schema) -> None:
        theme = schema.defaults()
        reordered = {key: theme[key] for key in reversed(list(theme))}
        reordered["brand"] = dict(reversed(list(theme["brand"].items())))
        assert list(to_css_variables(schema, reordered)) == list(
            to_css_variables(schema, theme)
        )

    def test_prefix_and_separator(self, schema: Schema) -> None:
        options = CssVariableOptions(prefix="lv", separator="_")
        variables = to_css_variables(schema, schema.defaults(), options)
        assert "--lv_brand_primary" in variables
        assert "--lv_typography_font-family" in variables

    def test_custom_name_transform(self, schema: Schema) -> None:
        options = CssVariableOptions(transform_name=str.upper)
        variables = to_css_variables(schema, schema.defaults(), options)
        assert "--BRAND-PRIMARY" in variables

    def test_value_formatting(self) -> None:
        schema = create_schema(
            {
                "flag": t.boolean(True),
                "ratio": t.number(2.0),
                "weight": t.font_weight(600),
                "label": t.string("  padded  "),
            }
        )
        assert to_css_variables(schema, schema.defaults()) == {
            "--flag": "true",
            "--ratio": "2",
            "--weight": "600",
            "--label": "padded",
        }

    def test_values_escaped(self) -> None:
        schema = create_schema({"label": t.string("x")})
        theme = merge(schema, {"label": "a; } body { color: red"})
        assert to_css_variables(schema, theme) == {
            "--label": "a\\; \\} body \\{ color: red"
        }


class TestToCssString:
    """Tests for to_css_string()."""

    def test_root_block(self, schema: Schema) -> None:
        css = to_css_string(schema, schema.defaults())
        assert css == (
            ":root {\n"
            "  --brand-primary: #3b82f6;\n"
            "  --brand-secondary: #64748b;\n"
            "  --spacing-sm: 0.5rem;\n"
            "  --spacing-md: 1rem;\n"
            "  --typography-font-family: Inter, sans-serif;\n"
            "  --typography-scale: 1.25;\n"
            "}"
        )

    def test_one_declaration_per_leaf_with_theme_values(self, schema: Schema) -> None:
        theme = merge(schema, {"brand": {"primary": "#000"}, "spacing": {"md": "2rem"}})
        css = to_css_string(schema, theme)
        declarations = re.findall(r"^  (--[\w-]+): (.*);$", css, re.MULTILINE)
        assert len(declarations) == len(schema)
        assert declarations[0] == ("--brand-primary", "#000")
        assert ("--spacing-md", "2rem") in declarations

    def test_custom_selector(self, schema: Schema) -> None:
        css = to_css_string(schema, schema.defaults(), selector=".tenant")
        assert css.startswith(".tenant {\n")

    def test_empty_schema(self) -> None:
        schema = create_schema({})
        assert to_css_string(schema, {}) == ""


class TestToCssStringAll:
    """Tests for multi-theme output."""

    @pytest.fixture
    def themes(self, schema: Schema) -> dict:
        return {
            "light": merge(schema, {"brand": {"primary": "#ffffff"}}),
            "dark": merge(schema, {"brand": {"primary": "#000000"}}),
        }

    def test_root_and_attribute_blocks(self, schema: Schema, themes: dict) -> None:
        css = to_css_string_all(schema, themes, "light")
        blocks = css.split("\n\n")
        assert blocks == [
            to_css_string(schema, themes["light"]),
            to_css_string(schema, themes["light"], selector='[data-theme="light"]'),
            to_css_string(schema, themes["dark"], selector='[data-theme="dark"]'),
        ]

    def test_custom_attribute(self, schema: Schema, themes: dict) -> None:
        css = to_css_string_all(schema, themes, "dark", attribute="data-tenant")
        assert '[data-tenant="dark"] {' in css
        assert "data-theme" not in css

    def test_theme_id_quoted(self, schema: Schema, themes: dict) -> None:
        css = to_css_string_all(schema, {'x"y': themes["light"]}, 'x"y')
        assert '[data-theme="x\\"y"] {' in css

    def test_unknown_default_theme(self, schema: Schema, themes: dict) -> None:
        with pytest.raises(ValueError, match="'sepia' is not in themes"):
            to_css_string_all(schema, themes, "sepia")


class TestCssVar:
    """Tests for var() reference helpers."""

    def test_css_var(self) -> None:
        assert css_var("brand.primary") == "var(--brand-primary)"
        assert css_var("typography.fontFamily") == "var(--typography-font-family)"

    def test_css_var_with_prefix(self) -> None:
        options = CssVariableOptions(prefix="lv")
        assert css_var("brand.primary", options) == "var(--lv-brand-primary)"

    def test_helper_matches_serialized_names(self, schema: Schema) -> None:
        var = create_css_var_helper(schema)
        variables = to_css_variables(schema, schema.defaults())
        for path in schema.paths:
            name = var(path)[len("var(") : -1]
            assert name in variables

    def test_helper_rejects_unknown_path(self, schema: Schema) -> None:
        var = create_css_var_helper(schema)
        with pytest.raises(KeyError, match="brand.tertiary"):
            var("brand.tertiary")


class TestEscaping:
    def test_escape_css_value(self) -> None:
        assert escape_css_value('a"b') == 'a\\"b'
        assert escape_css_value("a\\b") == "a\\\\b"
        assert escape_css_value("line\nbreak") == "line\\nbreak"
        assert escape_css_value("plain") == "plain"

    def test_needs_css_escaping(self) -> None:
        assert needs_css_escaping("a;b")
        assert not needs_css_escaping("#fff")
