# Routes package init
"""
Gallery API — API Routes Package
==================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - projects.py:  GET    /api/projects         (list, newest first)
                    DELETE /api/projects/{id}    (delete record and image)
    - upload.py:    POST   /api/upload           (upload image, create record)

Static files are mounted at "/" in main.py, after these routers.

Design Principle:
    Routes handle HTTP concerns only (form parsing, status codes) and delegate
    everything else to ProjectService.
"""
