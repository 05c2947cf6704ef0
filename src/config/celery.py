"""Celery application for the marketplace.

``DJANGO_SETTINGS_MODULE`` is set before the app is created so Celery reads
its configuration from the Django settings (``CELERY_`` prefix).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("curio_market")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up tasks.py from every installed module
app.autodiscover_tasks()
