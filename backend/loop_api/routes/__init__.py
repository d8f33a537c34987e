# Routes package init
"""
Loop API — API Routes Package
===============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - admin.py:     POST /api/admin/distribute-bonus
                    POST /api/admin/quests/{quest_id}/toggle
                    GET  /api/admin/quests
                    POST /api/admin/quests
                    PUT  /api/admin/quests/{quest_id}
                    DELETE /api/admin/quests/{quest_id}
    - shop.py:      GET  /api/inventory
                    GET  /api/shop/items
    - loops.py:     GET  /api/loop-interactions
    - messages.py:  POST /api/messages/reactions
    - users.py:     GET  /api/users
                    GET  /api/users/profile
                    POST /api/users/update-profile
    - health.py:    GET  /health

Design Principle:
    Routes are THIN. Each one declares its auth dependency, parses its
    parameters into a typed query or request model, and hands off to one
    service call. Errors are raised, never returned; the global handlers
    in main.py build the error response.
"""
