"""
Hevy API v1 client.

Thin wrapper over requests for the three resources the importer touches:
exercise_templates, routine_folders, routines.

Environment Variables:
  HEVY_API_KEY   - API key from the Hevy developer settings (required)
  HEVY_API_BASE  - Override the API base URL (optional)
"""

import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import requests
from dotenv import load_dotenv

from .types import SyncConfig

# Load .env from project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
ENV_FILE = PROJECT_ROOT / ".env"
load_dotenv(ENV_FILE)

logger = logging.getLogger(__name__)


class HevyAPIError(RuntimeError):
    """Non-success response from the Hevy API."""

    def __init__(self, method: str, resource: str, status: int, body: str):
        self.method = method
        self.resource = resource
        self.status = status
        self.body = body
        super().__init__(f"API {method} {resource} failed: {status} - {body}")


def get_api_key() -> str:
    """Load the API key from environment."""
    api_key = os.environ.get("HEVY_API_KEY")
    if not api_key:
        raise ValueError(
            "HEVY_API_KEY environment variable is required. Set in .env:\n"
            "  HEVY_API_KEY=your_api_key"
        )
    return api_key


class HevyClient:
    """Sequential Hevy API client with fixed delays for the rate limit."""

    def __init__(self, api_key: str, config: Optional[SyncConfig] = None,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config or SyncConfig()
        self.base_url = os.environ.get("HEVY_API_BASE", self.config.api_base).rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "api-key": api_key,
            "Content-Type": "application/json",
        })
        self._sleep = sleep

    @classmethod
    def from_env(cls, config: Optional[SyncConfig] = None) -> 'HevyClient':
        return cls(get_api_key(), config=config)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # =========================================================================
    # Transport
    # =========================================================================

    def _request(self, method: str, resource: str, params: Optional[Dict] = None,
                 body: Optional[Dict] = None) -> requests.Response:
        url = f"{self.base_url}/{resource}"
        logger.debug("%s %s params=%s", method, url, params)

        response = self.session.request(
            method,
            url,
            params=params,
            json=body,
            timeout=self.config.timeout,
        )

        if not response.ok:
            raise HevyAPIError(method, resource, response.status_code, response.text)
        return response

    @staticmethod
    def _decode(response: requests.Response) -> Dict[str, Any]:
        # Some create endpoints answer with a bare id instead of JSON
        text = response.text
        try:
            data = response.json()
        except ValueError:
            return {"id": text.strip().strip('"')}
        if isinstance(data, (str, int)):
            return {"id": data}
        return data

    # =========================================================================
    # Collection Operations
    # =========================================================================

    def list_page(self, resource: str, page: int, page_size: Optional[int] = None) -> Dict[str, Any]:
        """
        Fetch one page of a collection.

        Returns:
            {"items": [...], "page": n, "page_count": m}
        """
        params = {"page": page}
        if page_size:
            params["pageSize"] = page_size
        data = self._request("GET", resource, params=params).json()
        return {
            "items": data.get(resource, []),
            "page": data.get("page", page),
            "page_count": data.get("page_count", page),
        }

    def list_all(self, resource: str, page_size: Optional[int] = None) -> List[Dict[str, Any]]:
        """Walk every page of a collection, pausing between pages."""
        items = []
        page = 1
        page_count = 1

        while page <= page_count:
            result = self.list_page(resource, page, page_size)
            items.extend(result["items"])
            page_count = result["page_count"]
            page += 1
            self._sleep(self.config.page_delay)

        logger.debug("Fetched %d %s", len(items), resource)
        return items

    def create(self, resource: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = self._decode(self._request("POST", resource, body=payload))
        self._sleep(self.config.mutation_delay)
        return data

    def update(self, resource: str, object_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = self._decode(self._request("PUT", f"{resource}/{object_id}", body=payload))
        self._sleep(self.config.mutation_delay)
        return data

    # =========================================================================
    # Resource Helpers
    # =========================================================================

    def fetch_exercise_templates(self) -> List[Dict[str, Any]]:
        return self.list_all("exercise_templates", page_size=self.config.page_size)

    def fetch_routine_folders(self) -> List[Dict[str, Any]]:
        return self.list_all("routine_folders")

    def fetch_routines(self) -> List[Dict[str, Any]]:
        return self.list_all("routines")
