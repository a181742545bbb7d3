wsgi_app = "classdesk.main:app"
bind = "127.0.0.1:8000"
# Single worker: the entity store is held in process memory.
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
timeout = 60
graceful_timeout = 30
keepalive = 5
loglevel = "info"
accesslog = "-"
errorlog = "-"
