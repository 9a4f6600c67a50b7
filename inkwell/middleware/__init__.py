"""
Inkwell Backend - Middleware Package
====================================

Request path (first to last):

    [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → route

Rate limiting runs outermost, before a request id exists. The access log runs
inside the request-id middleware so every line carries the id.
"""
