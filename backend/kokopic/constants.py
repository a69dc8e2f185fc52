"""Application constants to avoid magic strings."""

class TokenCategory:
    """Verification token category constants."""

    EMAIL_VERIFICATION = "email_verification"

class RequestStatus:
    """Photo request status constants."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

# Mean Earth radius used by the haversine distance, in metres
EARTH_RADIUS_M = 6_371_000.0
