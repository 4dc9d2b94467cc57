"""
WSGI entrypoint for the CXO survey API.

Used by ``runserver`` through ``WSGI_APPLICATION`` and by gunicorn in
deployments.
"""

import os
import sys
from pathlib import Path

from django.core.wsgi import get_wsgi_application

# Apps live inside the cxo_survey package directory.
BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "cxo_survey"))
if "DJANGO_SETTINGS_MODULE" not in os.environ:
    build_env = os.environ.get("BUILD_ENV", "production").lower()
    default_settings = (
        "config.settings.local"
        if build_env == "local"
        else "config.settings.production"
    )
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", default_settings)

application = get_wsgi_application()
