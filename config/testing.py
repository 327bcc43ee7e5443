import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "patrons_checkin_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SESSION_HEADER = "Authorization"
PROXY_FIX_HOPS = 0
PUBLIC_CHECKIN_URL = "http://checkin.test/{venue}/{area}"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

RECAPTCHA_SECRET = ""
RECAPTCHA_THRESHOLD = 0.5
UNSUBSCRIBE_URL = "http://checkin.test/email/unsubscribe/{id}"
SMTP_HOST = ""
MAIL_SENDER = "news@checkin.test"
