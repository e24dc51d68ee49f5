# workforce/tests/__init__.py
