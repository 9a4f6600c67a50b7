# Services package init
"""
Inkwell Backend - Services Layer
================================

Service Inventory:
    - BlogService:      create / get / update / delete, author listing
    - QueryService:     latest, popular, featured, category pages and counts,
                        random samples, id list
    - ReactionService:  atomic like toggle and status
    - SearchService:    rapidfuzz search over the whole collection

Services are stateless singletons. Each call receives the Motor collection
from the route, so tests pass a mock collection instead of a database.
"""
