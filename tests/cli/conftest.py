"""Shared fixtures for CLI tests.

Builds small application directories on disk for ``DirectoryStore``.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    """An application with one resolvable and one missing dependency.

    Layout::

        index.js     requires ./lib.js, ./gone.js and fs
        lib.js       imports dep
        node_modules/dep/index.js
    """
    root = tmp_path / "app"
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "index.js").write_text(
        'const fs = require("fs")\n'
        'require("./lib.js")\n'
        'require("./gone.js")\n'
    )
    (root / "lib.js").write_text('import dep from "dep"\n')
    (root / "node_modules" / "dep" / "index.js").write_text("export default 1\n")
    return root
