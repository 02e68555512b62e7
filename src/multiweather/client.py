# OOP boundary for external i/o
# every provider and the geocoder talk http through JSONClient, so errors look the same everywhere
# one session per call: aggregator workers live for a single request, so nothing is kept between calls

from __future__ import annotations
from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter

DEFAULT_USER_AGENT = "multiweather/0.1"


class ProviderError(RuntimeError):
    # single error type for transport, status and decode failures
    retryable = False


class NoLocationMatch(ProviderError):
    # the geocoder answered but had nothing for the query, asking again later may help
    retryable = True


class AggregationTimeout(ProviderError):
    # only raised when the aggregator is configured to treat the deadline as an error
    pass


class JSONClient:
    # base URL, timeout and session handling shared by all upstream services
    name = "http"
    DEFAULT_TIMEOUT = 5.0

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

    def _build_session(self) -> requests.Session:
        # no retries: a failed upstream call fails the request
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        adapter = HTTPAdapter(max_retries=0)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = self.base_url + path
        # closed on the way out, also when an abandoned call finishes after the aggregator returned
        with self._build_session() as sess:
            try:
                resp = sess.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as exc:
                # wrap requests exceptions with context for easier debugging
                raise ProviderError(f"{self.name}: request error: {exc}") from exc
            return self._decode(resp)

    def _decode(self, resp: requests.Response) -> Dict[str, Any]:
        with resp:
            if resp.status_code >= 400:
                # include a short response snippet to speed up triage
                snippet = (resp.text or "")[:300]
                raise ProviderError(f"{self.name}: HTTP {resp.status_code}. Body: {snippet}")

            try:
                data = resp.json()
            except ValueError as exc:
                raise ProviderError(f"{self.name}: invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise ProviderError(f"{self.name}: unexpected payload type {type(data).__name__}")
        return data


def extract(data: Dict[str, Any], *keys: Any, source: str) -> Any:
    # walk a nested payload, turning any shape mismatch into a ProviderError
    node: Any = data
    try:
        for key in keys:
            node = node[key]
    except (KeyError, IndexError, TypeError) as exc:
        path = ".".join(str(k) for k in keys)
        raise ProviderError(f"{source}: unexpected API shape: missing {path}") from exc
    return node


def extract_float(data: Dict[str, Any], *keys: Any, source: str) -> float:
    value = extract(data, *keys, source=source)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        path = ".".join(str(k) for k in keys)
        raise ProviderError(f"{source}: {path} is not a number: {value!r}") from exc
