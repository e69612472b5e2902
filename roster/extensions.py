"""
Shared Flask extension instances.

Centralized to avoid circular imports. Extensions are initialized
here but configured in create_app().
"""

import os
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from apscheduler.schedulers.background import BackgroundScheduler
from flask_limiter import Limiter

from roster.utils.ip_handler import get_client_ip

# Initialize extensions (without binding to an app yet)
db = SQLAlchemy()
migrate = Migrate()
scheduler = BackgroundScheduler()

# Explicitly configured storage URI takes precedence, then a Redis URL.
# Without either the limiter keeps its counters in process memory.
if os.environ.get('RATELIMIT_STORAGE_URI'):
    storage_uri = os.environ.get('RATELIMIT_STORAGE_URI')
elif os.environ.get('REDIS_URL'):
    storage_uri = os.environ.get('REDIS_URL')
else:
    storage_uri = 'memory://'

# No default limits: only routes that opt in with @limiter.limit are throttled.
limiter = Limiter(
    key_func=get_client_ip,
    storage_uri=storage_uri,
    strategy="fixed-window"
)
