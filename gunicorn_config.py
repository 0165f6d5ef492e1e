"""Gunicorn settings for the route resolver API."""

import logging
import os

wsgi_app = "app:app"
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
proc_name = "bustrack-resolver"

# A cold route geocodes every stop through the per-worker rate limiter.
timeout = 120
graceful_timeout = 30

max_requests = 1000
max_requests_jitter = 100

loglevel = os.environ.get("LOG_LEVEL", "info")
accesslog = "-"
errorlog = "-"
logconfig_dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "app": {"format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s"},
    },
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "formatter": "app",
            "stream": "ext://sys.stderr",
        },
    },
    "root": {"level": loglevel.upper(), "handlers": ["stderr"]},
}


def on_starting(_server):
    logging.getLogger("gunicorn.error").info(
        "Starting route resolver with %d workers, timeout %ds", workers, timeout
    )


def worker_abort(worker):
    logging.getLogger("gunicorn.error").warning(
        "Route resolver worker %d aborted after %ds", worker.pid, timeout
    )
