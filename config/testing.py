from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

# tests inject an in-memory container: no database, no background jobs
AUTO_INIT_DB = False
SCHEDULER_ENABLED = False
