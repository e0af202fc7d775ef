# Services package init
"""
Gallery API — Services Layer
==============================

What:  Everything between the routes (HTTP) and the two external systems.

Service Inventory:
    - ProjectStore:   MongoDB record store client (motor)
    - AssetService:   Cloudinary upload/destroy client
    - ProjectService: Orchestrates upload → save and destroy → delete

ProjectStore and AssetService are built once at startup with their
configuration injected; ProjectService is assembled per request from them
by app.dependencies.
"""
