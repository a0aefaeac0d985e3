# scriptflow/api/__init__.py
