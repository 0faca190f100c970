import os

# Keep test runs independent of a developer's .env and error sink
os.environ.setdefault("ERROR_DSN", "")
os.environ.setdefault("FETCH_FONTS", "false")
os.environ.setdefault("LOG_LEVEL", "INFO")
