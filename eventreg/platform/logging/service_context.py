"""
Client context for log lines.

Several client processes (CLI sessions, notebooks, test workers) can write
to the same log directory, so each line carries `<client>@<host>:<pid>`.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    client_name = os.getenv('SERVICE_NAME', 'eventreg-client')
    worker = os.getenv('PYTEST_XDIST_WORKER')

    try:
        host = socket.gethostname().split('.')[0] or 'localhost'
    except OSError:
        host = 'localhost'

    process = f'{worker}-{os.getpid()}' if worker else str(os.getpid())
    return f'{client_name}@{host}:{process}'
