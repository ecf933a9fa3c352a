"""WSGI config for WaysProject."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "WaysProject.settings")

application = get_wsgi_application()
