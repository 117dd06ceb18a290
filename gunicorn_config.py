import multiprocessing

# Gunicorn Production Configuration
# Notification queues live in process memory, so one worker serves every
# session and concurrency comes from threads.
workers = 1
threads = multiprocessing.cpu_count() * 2 + 1
worker_class = 'gthread'

# Resilience
timeout = 120
max_requests = 1000
max_requests_jitter = 100
keepalive = 5

# Logging
accesslog = '-'       # Stdout
errorlog = '-'        # Stderr
loglevel = 'info'
capture_output = True
