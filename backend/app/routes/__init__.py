"""
Snapgram Backend — API Routes Package
=======================================

Route Inventory:
    - auth.py:    /api/auth/register, /api/auth/login
    - posts.py:   /api/posts/... (upload, feed, likes, comments)
    - users.py:   /api/user/... (profiles, friends)
    - files.py:   /uploads/{path} (stored images)
    - health.py:  /health

Routes are thin: they pull data out of the request, call a service and return
its response model. Status codes for failures come from the exception
handlers in main.py.
"""
