import os

# Bind to the port provided via the PORT environment variable, defaulting to
# 5000.
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# The in-memory query cache is per process, so each worker keeps its own
# copy. Point QUERY_CACHE_URL at redis to share cached listings.
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))
wsgi_app = "run:app"
