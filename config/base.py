"""Settings shared by every environment. Environment variables win."""

import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock"),
    "connection_timeout": int(os.getenv("DB_CONNECTION_TIMEOUT", "10")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Attendance rules
CLEANUP_RETENTION_DAYS = int(os.getenv("CLEANUP_RETENTION_DAYS", "30"))
STANDARD_WORK_HOURS = float(os.getenv("STANDARD_WORK_HOURS", "8"))

# Employee session tokens
SESSION_TTL_HOURS = float(os.getenv("SESSION_TTL_HOURS", "8"))
SESSION_MAX_ENTRIES = int(os.getenv("SESSION_MAX_ENTRIES", "1000"))

# Network allow-lists (exact addresses or CIDR ranges, comma separated)
IP_RESTRICTION_ENABLED = _flag("IP_RESTRICTION_ENABLED", "0")
ALLOWED_IPS = os.getenv("ALLOWED_IPS", "127.0.0.1,::1")
ADMIN_ALLOWED_IPS = os.getenv("ADMIN_ALLOWED_IPS", "127.0.0.1,::1")
# Reverse proxies in front of the app; 0 ignores X-Forwarded-For entirely
TRUSTED_PROXY_HOPS = int(os.getenv("TRUSTED_PROXY_HOPS", "0"))

# Optional first admin account, created on startup when both are set
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
