# Routes package init
"""
Twitter Clone Backend - API Routes Package
===========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - accounts.py: POST /register/, POST /login/               (public)
    - users.py:    /user/tweets/feed/, /user/following/,
                   /user/followers/, /user/tweets/ (GET, POST)  (bearer token)
    - tweets.py:   /tweets/{id}/ (GET, DELETE), /likes/, /replies/  (bearer token)
    - health.py:   GET /health                                  (public)

Routes stay thin: extract input, call a service, pick the response class.
"""
