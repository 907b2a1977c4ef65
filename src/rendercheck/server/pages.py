# src/rendercheck/server/pages.py
"""HTML page rendering for the fixture viewer.

Two pages:
- test page: fixture picker, the fixture's DOM node, one slot per render
  method filled in by the library in the browser, and the control image
- error page: exception message and traceback

The fixture's HTML and CSS are inserted verbatim since they are the
content under test. Everything else goes through jinja2 autoescaping.
"""

import traceback
from collections.abc import Sequence

import jinja2

from rendercheck.server.config import RenderConfig
from rendercheck.server.fixtures import Fixture, FixtureEntry

_TEST_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{% if fixture.name %}{{ fixture.name }} | {% endif %}Test Server</title>
    <script src="{{ render.script_url }}"></script>
    <style>
        * {
            box-sizing: border-box;
        }
    </style>
    <style>
        {{ fixture.style | safe }}
    </style>
</head>
<body>

    <form method="get" action="">
        <label>
            Resources
            <select name="resource">
            {%- for entry in fixtures %}
                <option{% if entry.file_name == fixture.name %} selected="selected"{% endif %}>{{ entry.file_name }}</option>
            {%- endfor %}
            </select>
        </label>
        <button type="submit">Test</button>
    </form>

    <h1>Test {{ fixture.name or "" }}</h1>

    <div>
        <h1>DOM node</h1>
        <div id="dom-node">{{ fixture.dom_node | safe }}</div>
    </div>

    <div>
        <h1>rendered image</h1>
        <div class="actuals">
        {%- for method in render.methods %}
            <div>
                <h2>{{ method.label }}</h2>
                <div id="actual-{{ method.name }}"></div>
            </div>
        {%- endfor %}
        </div>
    </div>

    <div>
        <h1>control image</h1>
        <img id="control-image" src="{{ fixture.control_image | trim }}">
    </div>

    <script>

        const methods = {{ render.methods | map(attribute="name") | list | tojson }};

        methods.forEach(method => {

            {{ render.library_global }}[method](document.getElementById('dom-node'))
                .then(dataUrl => {
                    const img = new Image();
                    img.src = dataUrl;
                    document.getElementById('actual-' + method).appendChild(img);
                });

        });

    </script>

</body>
</html>
"""

_ERROR_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Error: {{ message }} | Test Server</title>
</head>
<body>

    <h1>{{ message }}</h1>

    <pre>{{ trace }}</pre>

</body>
</html>
"""

_env = jinja2.Environment(
    autoescape=True,
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
)
_test_page = _env.from_string(_TEST_PAGE)
_error_page = _env.from_string(_ERROR_PAGE)


def render_test_page(
    fixtures: Sequence[FixtureEntry],
    fixture: Fixture,
    render: RenderConfig,
) -> str:
    """Render the test page for ``fixture``.

    Args:
        fixtures: Fixture directories offered in the picker
        fixture: Selected fixture (``Fixture.empty()`` when none is selected)
        render: Library script and render methods to drive in the browser
    """
    return _test_page.render(fixtures=fixtures, fixture=fixture, render=render)


def render_error_page(exc: BaseException, *, include_traceback: bool = True) -> str:
    """Render the error page for ``exc``."""
    trace = "".join(traceback.format_exception(exc)) if include_traceback else ""
    return _error_page.render(message=str(exc), trace=trace)
