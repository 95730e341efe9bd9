"""
Test Suite for Cocktails API

Test Organization:
- conftest.py: Shared fixtures (test database, client, users, cocktails)
- test_auth.py: Registration, login and token verification
- test_cocktails.py: /api/v1/cocktails endpoints and the catalog service
- test_ratings.py: /api/v1/ratings endpoints and rating aggregation
- test_favorites.py: Favorites replace/toggle
- test_users.py: Profile and ingredient list
- test_uploads.py: Image validation and storage
- test_security.py: Password hashing and tokens
- test_main.py: Health, root and error response shapes

Running Tests:
    pytest
    pytest tests/test_ratings.py -v
"""
