import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "patrons_checkin"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Header carrying the manager session token
SESSION_HEADER = os.getenv("SESSION_HEADER", "Authorization")
# Number of trusted reverse proxies in front of the app (0 = use the socket address)
PROXY_FIX_HOPS = int(os.getenv("PROXY_FIX_HOPS", "0"))
# Public check-in page encoded into area QR codes
PUBLIC_CHECKIN_URL = os.getenv("PUBLIC_CHECKIN_URL", "http://localhost:3000/{venue}/{area}")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the demo venue and manager on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Newsletter sign-up: reCAPTCHA v3 secret and the welcome mail relay (empty SMTP_HOST only logs mail)
RECAPTCHA_SECRET = os.getenv("RECAPTCHA_SECRET", "")
RECAPTCHA_THRESHOLD = float(os.getenv("RECAPTCHA_THRESHOLD", "0.5"))
UNSUBSCRIBE_URL = os.getenv("UNSUBSCRIBE_URL", "https://patrons.at/email/unsubscribe/{id}")
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
MAIL_SENDER = os.getenv("MAIL_SENDER", "info@patrons.at")
