# src/processors/__init__.py — v1
