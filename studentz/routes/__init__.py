"""Blueprint registration.

`main` serves the printable pages, `api` the JSON endpoints under /api.
"""

from .pages import main as main_bp
from .api import api as api_bp


def register_blueprints(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix="/api")
