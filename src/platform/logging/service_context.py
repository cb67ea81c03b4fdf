"""Service identity stamped on every log line (name@env:instance)."""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'venue-access')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostnames are unique per replica; locally the pid is enough
    instance = os.getenv('HOSTNAME') or f'{socket.gethostname()}-{os.getpid()}'

    return f'{service_name}@{deploy_env}:{instance[:24]}'
