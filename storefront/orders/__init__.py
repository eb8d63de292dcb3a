"""Orders and reviews: models, cache, storage, events and HTTP routes."""