"""Constants used across the application."""

# Request headers (Quart header lookup is case-insensitive)
DEV_USER_HEADER = "x-user-id"
AUTHORIZATION_HEADER = "authorization"
BEARER_PREFIX = "Bearer "

# Response messages
MISSING_AUTH_MESSAGE = (
    "Missing auth. Provide x-user-id (dev) or Authorization: Bearer <token>."
)
INVALID_AUTH_MESSAGE = "Invalid auth / user not found."
SERVER_ERROR_MESSAGE = "Server error"
REDACTED_DETAILS = "internal error"

PROFILE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
