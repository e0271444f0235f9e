# utils/http_session.py

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


def build_http_session(pool_size: int = 8) -> requests.Session:
    """
    Tuned HTTP session shared by the Service Layer callers.
    Retries are disabled: a batch is submitted once and the caller owns any retry policy.
    """
    session = requests.Session()
    no_retry = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=no_retry, pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


session = build_http_session()
