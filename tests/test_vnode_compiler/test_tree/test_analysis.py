"""Tests for static subtree detection."""

from typing import Optional

import pytest

from vnode_compiler.api import CompilerOptions
from vnode_compiler.codegen import default_directives
from vnode_compiler.tree import StaticAnalysis, detect_static_nodes, format_path, parse


def analyse(template: str, options: Optional[CompilerOptions] = None) -> StaticAnalysis:
    options = options or CompilerOptions()
    return detect_static_nodes(parse(template)[0], options)


class TestDetectStaticNodes:
    """Test the static/dynamic classification rules."""

    def test_plain_tree_is_static(self) -> None:
        """Test a tree without dynamic signals."""
        analysis = analyse("<div><p>hi</p></div>")

        assert analysis.is_static()
        assert analysis.is_static((0,))
        assert analysis.is_static((0, 0))
        assert len(analysis) == 3
        assert analysis.static_count == 3

    def test_interpolated_text_is_dynamic(self) -> None:
        """Test that markers make text and its ancestors dynamic."""
        analysis = analyse("<div><p>Hi {{ name }}</p><span>x</span></div>")

        assert analysis.is_static((0, 0)) is False
        assert analysis.is_static((0,)) is False
        assert analysis.is_static(()) is False
        assert analysis.is_static((1,)) is True
        assert analysis.is_static((1, 0)) is True

    def test_directive_prop_is_dynamic(self) -> None:
        """Test that registered directives make an element dynamic."""
        options = CompilerOptions(directives=default_directives())
        analysis = analyse('<ul><li for="item in items">x</li></ul>', options)

        assert analysis.is_static((0,)) is False
        assert analysis.is_static((0, 0)) is True
        assert analysis.is_static(()) is False

    def test_unregistered_directive_name_is_plain_prop(self) -> None:
        """Test that a prop only counts as a directive when registered."""
        assert analyse('<p if="show">x</p>').is_static()

    def test_bound_prop_is_dynamic(self) -> None:
        """Test that data-bound keys make an element dynamic."""
        analysis = analyse('<a :href="url">link</a>')

        assert analysis.is_static() is False
        assert analysis.is_static((0,)) is True

    def test_interpolated_prop_value_is_dynamic(self) -> None:
        """Test that markers in prop values make an element dynamic."""
        assert analyse('<a title="{{ label }}">x</a>').is_static() is False

    def test_boolean_prop_is_static(self) -> None:
        """Test that flag props do not affect classification."""
        assert analyse("<input disabled/>").is_static()

    def test_every_child_is_classified(self) -> None:
        """Test that classification continues after a dynamic child."""
        analysis = analyse("<div><p>{{ a }}</p><p>b</p><p>c</p></div>")

        assert analysis.dynamic_paths() == [(), (0,), (0, 0)]
        assert analysis.static_paths() == [(1,), (1, 0), (2,), (2, 0)]

    def test_custom_interpolation_pattern(self) -> None:
        """Test classification with a different marker syntax."""
        options = CompilerOptions(interpolation_regex=r"\$\{(.+?)\}")

        assert analyse("<p>{{ a }}</p>", options).is_static()
        assert analyse("<p>${a}</p>", options).is_static() is False

    def test_analysis_does_not_touch_nodes(self) -> None:
        """Test that nodes carry no classification afterwards."""
        root = parse("<p>{{ a }}</p>")[0]
        detect_static_nodes(root, CompilerOptions())

        assert not hasattr(root, "static")
        assert root.props == {}


class TestStaticAnalysis:
    """Test the classification container."""

    def test_missing_path_raises_key_error(self) -> None:
        """Test lookups of paths that were never analysed."""
        with pytest.raises(KeyError):
            analyse("<p>x</p>").is_static((5,))

    def test_membership_and_iteration(self) -> None:
        """Test container protocol."""
        analysis = analyse("<p><b>x</b></p>")

        assert (0, 0) in analysis
        assert (1,) not in analysis
        assert list(analysis) == [(), (0,), (0, 0)]

    def test_to_dict_uses_formatted_paths(self) -> None:
        """Test JSON-friendly conversion."""
        assert analyse("<p>{{ a }}</p>").to_dict() == {"/": False, "/0": False}

    def test_format_path(self) -> None:
        """Test path rendering."""
        assert format_path(()) == "/"
        assert format_path((0, 2)) == "/0/2"
