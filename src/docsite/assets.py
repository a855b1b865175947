"""Location of the site's frontend shell.

The package ships `static/index.html`, which every non-API, non-redirect
route falls back to, plus optional `static/assets/` and `static/favicon.png`
when a built frontend is dropped in.
"""

from importlib.resources import files
from pathlib import Path

STATIC_PACKAGE_DIR = "static"


def get_static_dir() -> Path:
    """Return the directory holding the frontend shell.

    Raises:
        FileNotFoundError: If the package was installed without its static files.
    """
    static = files("docsite").joinpath(STATIC_PACKAGE_DIR)
    if not static.is_dir():
        raise FileNotFoundError(
            "Bundled static assets not found: the docsite package is missing "
            f"its '{STATIC_PACKAGE_DIR}' directory. Reinstall docsite."
        )
    return Path(str(static))
