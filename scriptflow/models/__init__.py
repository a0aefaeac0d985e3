# scriptflow/models/__init__.py
