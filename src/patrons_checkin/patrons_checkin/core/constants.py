"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Area.active_service_id when the area has no running service.
NO_ACTIVE_SERVICE = "NONE"

# GamingPatron.check_out_time / Service.closed_at before the event happens.
NOT_YET = -1

PBKDF2_ITERATIONS = 20000
PBKDF2_HASH_BYTES = 64
SALT_BYTES = 128 // 8

SESSION_TOKEN_BYTES = 128
DEFAULT_SESSION_HEADER = "Authorization"

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
DEFAULT_RECAPTCHA_THRESHOLD = 0.5
DEFAULT_UNSUBSCRIBE_URL = "https://patrons.at/email/unsubscribe/{id}"
DEFAULT_MAIL_SENDER = "info@patrons.at"
