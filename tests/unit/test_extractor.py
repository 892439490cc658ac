"""Tests for dependency extraction."""

from __future__ import annotations

import pytest

from jsbundle.errors import ConventionViolation, NamingMismatch, UnsortedImports
from jsbundle.extractor import DependencyExtractor, ImportDecl
from jsbundle.parser import SourceParser


class TestDependenciesOf:
    """Tests for DependencyExtractor.dependencies_of."""

    def test_no_imports(self, abc_layout):
        """Test a module without imports."""
        extractor = DependencyExtractor(SourceParser(), abc_layout)
        assert extractor.dependencies_of("a") == []

    def test_imports_in_file_order(self, abc_layout):
        """Test that dependencies come back in file order."""
        extractor = DependencyExtractor(SourceParser(), abc_layout)
        assert extractor.dependencies_of("c") == ["a", "b"]

    def test_internal_import(self, write_modules):
        """Test that internal modules are resolved and named without the directory."""
        layout = write_modules(
            {
                "_identity": "module.exports = function _identity(x) { return x; };\n",
                "identity": (
                    "var _identity = require('./internal/_identity');\n"
                    "\n"
                    "module.exports = _identity;\n"
                ),
            }
        )
        extractor = DependencyExtractor(SourceParser(), layout)

        assert extractor.dependencies_of("identity") == ["_identity"]
        assert extractor.dependencies_of("_identity") == []

    def test_internal_module_imports_public_module(self, write_modules):
        """Test that ../ paths from the internal directory are accepted."""
        layout = write_modules(
            {
                "map": "module.exports = 1;\n",
                "_xmap": "var map = require('../map');\n\nmodule.exports = map;\n",
            }
        )
        extractor = DependencyExtractor(SourceParser(), layout)
        assert extractor.dependencies_of("_xmap") == ["map"]

    def test_dotted_path_with_custom_internal_dir(self, write_modules):
        """Test that ./_internal/foo.bar binds to fooBar when _internal is the internal dir."""
        layout = write_modules(
            {"m": "var fooBar = require('./_internal/foo.bar');\n\nmodule.exports = fooBar;\n"},
            internal_dir="_internal",
        )
        extractor = DependencyExtractor(SourceParser(), layout)
        assert extractor.dependencies_of("m") == ["fooBar"]

    def test_dotted_path_wrong_name(self, write_modules):
        """Test that any other binding of ./_internal/foo.bar is a NamingMismatch."""
        layout = write_modules(
            {"m": "var foo_bar = require('./_internal/foo.bar');\n\nmodule.exports = foo_bar;\n"},
            internal_dir="_internal",
        )
        extractor = DependencyExtractor(SourceParser(), layout)

        with pytest.raises(NamingMismatch) as excinfo:
            extractor.dependencies_of("m")
        assert excinfo.value.context["expected"] == "fooBar"
        assert excinfo.value.context["actual"] == "foo_bar"

    def test_import_block_ends_at_first_other_statement(self, write_modules):
        """Test that only the leading run of var declarations is read."""
        layout = write_modules(
            {
                "m": (
                    "var a = require('./a');\n"
                    "'use strict';\n"
                    "var zz = 1, yy = 2;\n"
                    "module.exports = a;\n"
                )
            }
        )
        extractor = DependencyExtractor(SourceParser(), layout)
        assert extractor.dependencies_of("m") == ["a"]

    def test_const_is_not_an_import(self, write_modules):
        """Test that let/const declarations end the import block."""
        layout = write_modules({"m": "const a = require('./a');\nmodule.exports = a;\n"})
        extractor = DependencyExtractor(SourceParser(), layout)
        assert extractor.dependencies_of("m") == []

    def test_idempotent(self, abc_layout):
        """Test that repeated extraction gives the same list from one parse."""
        parser = SourceParser()
        extractor = DependencyExtractor(parser, abc_layout)

        first = extractor.dependencies_of("c")
        second = extractor.dependencies_of("c")

        assert first == second == ["a", "b"]
        assert first is not second
        assert len(parser) == 1


class TestImportValidation:
    """Tests for import block convention failures."""

    def test_multiple_bindings(self, write_modules):
        """Test that two bindings in one var statement are rejected."""
        layout = write_modules(
            {"m": "var a = require('./a'), b = require('./b');\nmodule.exports = a;\n"}
        )
        extractor = DependencyExtractor(SourceParser(), layout)

        with pytest.raises(ConventionViolation) as excinfo:
            extractor.dependencies_of("m")
        assert excinfo.value.construct == "var a = require('./a'), b = require('./b');"
        assert excinfo.value.line == 1

    def test_non_literal_require(self, write_modules):
        """Test that a computed require path is rejected."""
        layout = write_modules({"m": "var a = require('./' + 'a');\nmodule.exports = a;\n"})
        extractor = DependencyExtractor(SourceParser(), layout)

        with pytest.raises(ConventionViolation):
            extractor.dependencies_of("m")

    def test_unsorted(self, write_modules):
        """Test that out-of-order imports raise UnsortedImports."""
        layout = write_modules(
            {"m": "var z = require('./z');\nvar a = require('./a');\nmodule.exports = a;\n"}
        )
        extractor = DependencyExtractor(SourceParser(), layout)

        with pytest.raises(UnsortedImports) as excinfo:
            extractor.dependencies_of("m")
        assert excinfo.value.context["actual"] == ["z", "a"]
        assert excinfo.value.context["expected"] == ["a", "z"]

    def test_order_checked_before_names(self, write_modules):
        """Test that sorting is reported even when a name also mismatches."""
        layout = write_modules(
            {"m": "var z = require('./y');\nvar a = require('./a');\nmodule.exports = a;\n"}
        )
        extractor = DependencyExtractor(SourceParser(), layout)

        with pytest.raises(UnsortedImports):
            extractor.dependencies_of("m")

    def test_shape_checked_before_order(self, write_modules):
        """Test that a malformed declaration is reported before ordering."""
        layout = write_modules(
            {"m": "var z = require('./z');\nvar a = 1;\nmodule.exports = a;\n"}
        )
        extractor = DependencyExtractor(SourceParser(), layout)

        with pytest.raises(ConventionViolation) as excinfo:
            extractor.dependencies_of("m")
        assert not isinstance(excinfo.value, UnsortedImports)

    def test_naming_mismatch(self, write_modules):
        """Test that a binding not matching its path raises NamingMismatch."""
        layout = write_modules({"m": "var bar = require('./foo');\nmodule.exports = bar;\n"})
        extractor = DependencyExtractor(SourceParser(), layout)

        with pytest.raises(NamingMismatch) as excinfo:
            extractor.dependencies_of("m")
        assert excinfo.value.line == 1
        assert "'foo'" in excinfo.value.message


class TestImportsOf:
    """Tests for full import records."""

    def test_records(self, abc_layout):
        """Test that records carry name, path, line and text."""
        extractor = DependencyExtractor(SourceParser(), abc_layout)

        assert extractor.imports_of("c") == [
            ImportDecl(name="a", path="./a", line=1, text="var a = require('./a');"),
            ImportDecl(name="b", path="./b", line=2, text="var b = require('./b');"),
        ]
        assert extractor.imports_of("c")[0].to_dict()["path"] == "./a"
