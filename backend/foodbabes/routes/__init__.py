# Routes package init
"""
Foodbabes Backend: API Routes Package
=======================================

What:  HTTP route handlers; thin wrappers over the services.

Route Inventory:
    - health.py:    GET  /health
    - files.py:     GET  /files/{path}
    - foods.py:     POST /foods, GET /foods, GET /foods/{id}
    - users.py:     POST /users, POST /sessions, GET /users/current
    - comments.py:  GET /, GET /{id}, POST /, POST /{id}/like

comments.py owns the catch-all `/{id}` path and is mounted last.
"""
