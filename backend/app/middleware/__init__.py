# Middleware package init
"""
Gallery API — Middleware Package
==================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route / Static files

    1. Request ID first, so every later log line can carry it
    2. Logging measures the full duration including both remote calls
    3. GZip and CORS are Starlette's stock middleware

Middleware added later runs first; see create_app() in main.py.
"""
