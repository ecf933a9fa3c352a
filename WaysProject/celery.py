import os

from celery import Celery

# Ensure Django settings are loaded for Celery workers
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "WaysProject.settings")

app = Celery("WaysProject")

# Read settings with CELERY_ prefix from Django settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Discover tasks.py in every installed app once Django is ready
app.autodiscover_tasks()
