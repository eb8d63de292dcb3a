"""Products and discounts: models, caches, storage, events and HTTP routes."""