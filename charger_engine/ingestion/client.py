from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import requests
import structlog
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import UpstreamFetchError

logger = structlog.get_logger()


class StationClient(Protocol):
    """Provider-agnostic interface for fetching raw charging stations.

    Implementations return the upstream records untouched, as a list of
    mappings. A result whose length equals `max_results` may be incomplete.
    """

    def fetch_stations(self, country_code: str, max_results: int) -> List[Dict[str, Any]]:
        """Fetch up to `max_results` stations located in `country_code`.

        Parameters
        ----------
        country_code : str
            ISO 3166-1 alpha-2 country code, e.g. "RS".
        max_results : int
            Upper bound on the number of records returned.

        Returns
        -------
        list of dict
            Raw station objects, one per charging location.
        """
        ...


@dataclass
class OpenChargeMapClient:
    """Open Charge Map implementation of `StationClient`.

    Notes and assumptions:
    - A single GET against the POI endpoint; results past `max_results` are
      not paged in.
    - Compact, non-verbose output: reference data (operators, connection
      types) is returned as ids only.
    - `max_retries` defaults to 0. When raised, retries apply to 429/5xx with
      exponential backoff.
    """

    base_url: str = "https://api.openchargemap.io/v3/poi/"
    api_key: Optional[str] = None
    timeout_connect: float = 5.0
    timeout_read: float = 30.0
    max_retries: int = 0
    backoff_factor: float = 0.5

    def _session(self) -> requests.Session:
        s = requests.Session()
        retries = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def fetch_stations(self, country_code: str, max_results: int) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {
            "countrycode": country_code,
            "maxresults": max_results,
            "compact": "true",
            "verbose": "false",
        }
        if self.api_key:
            params["key"] = self.api_key

        timeout = (self.timeout_connect, self.timeout_read)
        try:
            with self._session() as s:
                resp = s.get(self.base_url, params=params, timeout=timeout)
                resp.raise_for_status()
                data = resp.json()
        except requests.RequestException as e:
            raise UpstreamFetchError(f"Open Charge Map request failed: {e}") from e
        except ValueError as e:
            raise UpstreamFetchError(f"Open Charge Map returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise UpstreamFetchError(
                f"Open Charge Map returned {type(data).__name__}, expected a list of stations"
            )

        logger.info("ocm_fetch_completed", country_code=country_code, fetched=len(data), max_results=max_results)
        return data
