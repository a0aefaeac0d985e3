# scriptflow/core/__init__.py
