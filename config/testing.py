from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

# Tests inject a container built from in-memory repositories.
AUTO_INIT_DB = False
IP_RESTRICTION_ENABLED = False
TRUSTED_PROXY_HOPS = 0
LOG_LEVEL = "WARNING"
