# Entry point
wsgi_app = "authserver:create_app()"

# Bind & workers
bind = "0.0.0.0:8000"
workers = 2  # the in-memory token store is per process; use TOKEN_STORE=redis with >1 worker
threads = 1
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Trust proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False
