"""
Services Package

Business logic, kept separate from HTTP handling so it can be called from
routers, scripts and tests alike. Services raise cocktail_api.exceptions
errors and never build HTTP responses.

Current services:
- auth.py: Registration, login and bearer-token verification
- catalog.py: Cocktail creation (with image rollback), listing and detail
- favorites.py: Replace or toggle a user's favorite cocktails
- lookups.py: Shared get-or-404 helpers
- rate_limiter.py: Rate limiting with slowapi
- ratings.py: Rating aggregation and one-rating-per-user writes
- security.py: Password hashing and JWT utilities
- uploads.py: Image validation and storage on disk
- users.py: Profile reads and ingredient lists
"""
