"""Bundle templates: the wrapper the generated declarations are spliced into."""

from __future__ import annotations

from pathlib import Path

from jsbundle.errors import TemplateError

# UMD wrapper; {marker} is replaced by the declarations, {name} is the
# aggregate object's variable.
_DEFAULT_TEMPLATE = """\
;(function() {{

    'use strict';

    {marker}

    if (typeof exports === 'object') {{
        module.exports = {name};
    }} else if (typeof define === 'function' && define.amd) {{
        define(function() {{ return {name}; }});
    }} else {{
        this.{name} = {name};
    }}

}}.call(this));
"""


def default_template(marker: str, aggregate_name: str = "R") -> str:
    """Render the built-in UMD template."""
    return _DEFAULT_TEMPLATE.format(marker=marker, name=aggregate_name)


def load_template(path: Path | str | None, marker: str, aggregate_name: str = "R") -> str:
    """Read a template file, or render the built-in one when no path is given.

    Raises:
        TemplateError: If the file cannot be read
    """
    if path is None:
        return default_template(marker, aggregate_name)
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateError(f"Cannot read template {path}: {e}", path=str(path)) from e


def splice(template: str, marker: str, text: str) -> str:
    """Replace the first occurrence of the marker with the generated text.

    Raises:
        TemplateError: If the template does not contain the marker
    """
    if marker not in template:
        raise TemplateError(f"Template has no {marker!r} marker", marker=marker)
    return template.replace(marker, text, 1)
