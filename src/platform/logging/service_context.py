"""Service identity stamped on every log line."""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    """`<service>@<env>:<pid>`, e.g. `ticket-inventory@local_dev:4242`."""
    service_name = os.getenv('SERVICE_NAME', 'ticket-inventory')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    return f'{service_name}@{deploy_env}:{os.getpid()}'
