"""
WSGI config for config project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application

# Use DJANGO_SETTINGS_MODULE environment variable when provided, otherwise default to settings.development
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'settings.development')

application = get_wsgi_application()
