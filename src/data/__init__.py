# src/data/__init__.py — v1
