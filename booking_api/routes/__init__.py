# booking_api/routes/__init__.py
"""Route modules; each exposes ``router`` and is mounted by ``booking_api.main``."""
