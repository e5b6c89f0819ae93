"""
Celery configuration for the credential service.

The only background work is payment notification processing: PayPal IPN
deliveries are acknowledged by the web process and verified/reconciled by a
worker. Redis is both broker and result backend.

Usage:
    from payments.tasks import process_payment_notification

    process_payment_notification.delay(str(notification.id))

Set CELERY_TASK_ALWAYS_EAGER=True to run tasks in-process without a broker.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up payments/tasks.py
app.autodiscover_tasks()
