"""
API Blueprints
"""

from flask import Blueprint

songs_bp = Blueprint('songs', __name__, url_prefix='/api/songs')

# Route modules register on the blueprint at import time
from virtuoso.webui.api import songs  # noqa: E402,F401
