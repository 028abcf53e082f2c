# Services package init
"""
StayPlaces API: Services Layer
===============================

What:  Business logic between the routes (HTTP) and the repository (JSON file).

Service Inventory:
    - validator:     declarative field rules for place bodies
    - MediaService:  image validation and Cloudinary uploads
    - PlaceService:  list / search / create / update / delete
"""
