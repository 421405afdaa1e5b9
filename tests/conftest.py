from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import write_files
from wikigen.templates import load_templates

BASE_LAYOUT = """<!DOCTYPE html>
<html>
<head><title>{% block title %}Default Title{% endblock %}</title></head>
<body>
{% include "_nav" %}
<main>{% block content %}{% endblock %}</main>
</body>
</html>
"""

NAV_PARTIAL = '<nav><a href="/">Home</a> {{ path }}</nav>'


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    root = tmp_path / "templates"
    write_files(
        root,
        {
            "layouts/base.html": BASE_LAYOUT,
            "layouts/bare.html": "{% block content %}{% endblock %}",
            "partials/nav.html": NAV_PARTIAL,
        },
    )
    return root


@pytest.fixture
def templates(template_dir: Path):
    return load_templates(template_dir)
