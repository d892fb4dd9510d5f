# Routes package init
"""
Larder Backend — API Routes Package
====================================

What:  HTTP route handlers. Each module owns one resource.

Route Inventory:
    - health.py:         GET  /                      (liveness message)
                         GET  /health                (database probe)
    - auth.py:           POST /register, POST /login
    - ingredients.py:    POST /ingredients, GET /getIngredients,
                         GET  /ingredients-list
    - calories.py:       POST /calories, GET /calories
    - shopping_list.py:  GET/POST /shopping-list,
                         DELETE /shopping-list/{item_id}
    - leaderboard.py:    GET  /leaderboard           (public)
    - scan.py:           POST /scan-expiry           (public, multipart)
    - recipes.py:        GET  /recipes?query=        (public)

Routes stay thin: pull values out of the request, call one service
method, return its schema. Errors are raised as LarderError subclasses
and formatted by the handlers in main.py.
"""

from larder.routes import (
    auth,
    calories,
    health,
    ingredients,
    leaderboard,
    recipes,
    scan,
    shopping_list,
)

ROUTERS = [
    health.router,
    auth.router,
    ingredients.router,
    calories.router,
    shopping_list.router,
    leaderboard.router,
    scan.router,
    recipes.router,
]
