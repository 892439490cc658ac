"""Tests for bundle templates."""

from __future__ import annotations

from pathlib import Path

import pytest

from jsbundle.errors import TemplateError
from jsbundle.paths import DEFAULT_MARKER
from jsbundle.template import default_template, load_template, splice


class TestSplice:
    """Tests for marker replacement."""

    def test_replaces_marker(self):
        assert splice("before /* global R */ after", DEFAULT_MARKER, "X") == "before X after"

    def test_only_first_occurrence(self):
        """Test that later markers are left alone."""
        template = "/* global R */\n/* global R */"
        assert splice(template, DEFAULT_MARKER, "X") == "X\n/* global R */"

    def test_replacement_is_literal(self):
        """Test that backslashes and $ patterns are not interpreted."""
        assert splice("/* global R */", DEFAULT_MARKER, r"a\1$&b") == r"a\1$&b"

    def test_missing_marker(self):
        with pytest.raises(TemplateError, match="marker"):
            splice("nothing", DEFAULT_MARKER, "X")


class TestLoadTemplate:
    """Tests for loading templates."""

    def test_default(self):
        """Test that no path gives the built-in template."""
        template = load_template(None, DEFAULT_MARKER)
        assert template == default_template(DEFAULT_MARKER)
        assert "    /* global R */\n" in template
        assert "module.exports = R;" in template

    def test_default_aggregate_name(self):
        """Test that the built-in template exports the configured name."""
        template = default_template("/* global Lib */", "Lib")
        assert "module.exports = Lib;" in template
        assert "this.Lib = Lib;" in template
        assert "{{" not in template

    def test_file(self, tmp_path: Path):
        path = tmp_path / "template.js"
        path.write_text("wrap(/* global R */);\n")
        assert load_template(path, DEFAULT_MARKER) == "wrap(/* global R */);\n"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TemplateError, match="Cannot read template"):
            load_template(tmp_path / "missing.js", DEFAULT_MARKER)
