# Services package init
"""
Twitter Clone Backend - Services Layer
=======================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services receive the request's AsyncSession plus plain values, run the
       visibility-scoped queries and return response schemas or raise
       application exceptions.

Service Inventory:
    - UserService: register, login, following and followers lists
    - TweetService: feed, detail, likes, replies, own tweets, create, delete
"""
