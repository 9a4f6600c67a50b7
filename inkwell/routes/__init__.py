# Routes package init
"""
Inkwell Backend - API Routes Package
====================================

Route Inventory:
    - blogs.py:      POST   /blogs                 create
                     POST   /blogs/fetch           random samples per category
                     GET    /blogs/latest          newest
                     GET    /blogs/popular         most reacted
                     GET    /blogs/featured        configured picks
                     GET    /blogs/category-count  counts per category
                     GET    /blogs/category        paginated category page
                     GET    /blogs/ids             every _id / id pair
                     POST   /blogs/my-blogs        blogs by author email
                     POST   /blogs/search          fuzzy search
                     GET    /blogs/{id}            detail
                     PUT    /blogs/{id}            partial update
                     DELETE /blogs/{id}            delete
    - reactions.py:  PATCH  /blogs/react/{id}      toggle like
                     POST   /blog/react-status     like status
    - health.py:     GET    /, /health

Routes stay thin: read the request, call a service, return its result.
"""
