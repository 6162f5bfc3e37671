# Services package init
"""
Foodbabes Backend: Services Layer
===================================

What:  Business logic between the routes (HTTP) and the store.
How:   Services receive the request's AsyncSession (and the ImageStorage
       where needed), apply validation and business rules, and translate
       SQLAlchemy failures into application exceptions.

Service Inventory:
    - ImageStorage (abstract): validate, resize and store uploaded images
    - LocalImageStorage: images on local disk
    - MinioImageStorage: images in an S3-compatible bucket
    - FoodService: validate form → upload image → persist food post
    - CommentService: create, list latest, fetch, atomic like
    - UserService: register, login, access-token authentication
"""
