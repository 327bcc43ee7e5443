import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "patrons"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "patrons_checkin"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SESSION_HEADER = os.getenv("SESSION_HEADER", "Authorization")
PROXY_FIX_HOPS = int(os.getenv("PROXY_FIX_HOPS", "1"))
PUBLIC_CHECKIN_URL = os.getenv("PUBLIC_CHECKIN_URL", "https://checkin.example.com/{venue}/{area}")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
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
