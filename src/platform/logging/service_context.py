"""
Service context extraction for log traceability.

Every log line carries `service@environment:instance` so lines from several
back office processes can be told apart once they are collected together.
"""

import os
from functools import lru_cache
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'reservation-backoffice')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers get a short hostname; local runs fall back to the PID
    instance = os.getenv('HOSTNAME') or socket.gethostname()
    if not instance or deploy_env == 'local_dev':
        instance = str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance[:12]}'
