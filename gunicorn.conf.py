"""
Gunicorn configuration for production deployment of the CampusCircle API
"""
import multiprocessing
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.getenv("GUNICORN_WORKERS", min(multiprocessing.cpu_count() * 2 + 1, 4)))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 100
wsgi_app = "campuscircle.main:app"

# Worker lifecycle
max_requests = 1000  # Restart worker after 1000 requests (prevent memory leaks)
max_requests_jitter = 100  # Add randomness to prevent all workers restarting at once

# Timeouts
timeout = 30  # 30 seconds for request timeout
keepalive = 5  # Keep connections alive for 5 seconds
graceful_timeout = 30  # Wait 30 seconds for workers to finish during shutdown

# Process naming
proc_name = "campuscircle_api"

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Server hooks
def when_ready(server):
    server.log.info("CampusCircle API ready, spawning %s workers", workers)


def post_worker_init(worker):
    worker.log.info("Worker %s booted", worker.pid)
