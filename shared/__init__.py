# shared/__init__.py
"""
Shared package - status vocabularies and small helpers used by every app.
Avoids importing services to prevent circular dependencies.
"""
