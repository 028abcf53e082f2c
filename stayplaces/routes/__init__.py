# Routes package init
"""
StayPlaces API: Routes Package
===============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - places.py:  GET    /places             (list, optional exact title filter)
                  GET    /places/{token}     (exact-match search)
                  POST   /places             (multipart create, 201)
                  PUT    /places/{id}        (shallow-merge update)
                  DELETE /places/{id}        (delete)
    - health.py:  GET    /health             (service health check)

Routes stay thin: they decode the request, call PlaceService, and let the
global exception handlers produce error responses.
"""
