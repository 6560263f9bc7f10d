"""
Snapgram Backend — Services Layer
===================================

Business rules between the routes (HTTP) and the models (persistence). Every
service method takes the request's AsyncSession and only flushes; the session
dependency commits once the handler returns, so multi-row changes land
together or not at all.

Service Inventory:
    - TokenService:   sign and verify bearer tokens (PyJWT)
    - FileService:    image validation, storage and cleanup
    - UserService:    registration, login, profiles
    - FriendService:  mutual friend links
    - PostService:    uploads, likes, feed
    - CommentService: comments on posts
"""
