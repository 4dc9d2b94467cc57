"""
ASGI entrypoint for the CXO survey API.

Exposes the ASGI callable as ``application``; the API is plain HTTP so the
stock Django handler is served directly.
"""

import os
import sys
from pathlib import Path

from django.core.asgi import get_asgi_application

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "cxo_survey"))

if "DJANGO_SETTINGS_MODULE" not in os.environ:
    build_env = os.environ.get("BUILD_ENV", "production").lower()
    os.environ.setdefault(
        "DJANGO_SETTINGS_MODULE",
        "config.settings.local" if build_env == "local" else "config.settings.production",
    )

application = get_asgi_application()
