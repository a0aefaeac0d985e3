# scriptflow/services/__init__.py
