"""
WordPress REST API Client

Reads posts, pages and reusable blocks through /wp-json/wp/v2 using an
application password (Users > Profile > Application Passwords).

Each request is made exactly once. A failure raises WordPressAPIError and
the caller decides what to do with the partial data it already has.
"""
import logging
import os
from typing import Any, Dict, Iterator, List, Optional

import requests
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_PER_PAGE = 100
APP_PASSWORD_ENV = 'WP_APP_PASSWORD'


class WordPressAPIError(Exception):
    """A REST request failed or returned something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WordPressClient:
    """
    Thin requests-based client for the WordPress REST API.

    Usage:
        client = WordPressClient("https://example.com", "admin", app_password)
        for post in client.iter_collection("posts", params={"context": "edit"}):
            ...
    """

    def __init__(self, base_url: str, username: Optional[str] = None,
                 app_password: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.api_root = f"{self.base_url}/wp-json/wp/v2"
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'content-locator/0.1',
        })
        if username and app_password:
            # Application passwords are shown with spaces; WordPress ignores them
            self.session.auth = (username, app_password.replace(' ', ''))
        else:
            logger.warning("No credentials given - draft/private content and "
                           "context=edit requests will be refused")

        logger.info(f"Initialized WordPress client for {self.base_url}")

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """
        GET an endpoint relative to /wp-json/wp/v2.

        Raises:
            WordPressAPIError: on connection errors or non-200 responses
        """
        url = f"{self.api_root}/{endpoint.lstrip('/')}"
        logger.debug(f"GET {url} {params or ''}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise WordPressAPIError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            message = _error_message(response)
            raise WordPressAPIError(
                f"GET {endpoint} returned {response.status_code}: {message}",
                status_code=response.status_code,
            )
        return response

    def get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self.get(endpoint, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise WordPressAPIError(f"GET {endpoint} did not return JSON") from e

    def iter_collection(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
                        per_page: int = DEFAULT_PER_PAGE) -> Iterator[Dict[str, Any]]:
        """
        Yield every item of a paginated collection.

        Follows the X-WP-TotalPages header; stops early on an empty page.
        """
        page = 1
        total_pages = 1
        while page <= total_pages:
            page_params = dict(params or {})
            page_params.update({'per_page': per_page, 'page': page})

            response = self.get(endpoint, params=page_params)
            try:
                items = response.json()
            except ValueError as e:
                raise WordPressAPIError(f"GET {endpoint} page {page} did not return JSON") from e
            if not items:
                break

            total_pages = int(response.headers.get('X-WP-TotalPages', total_pages))
            logger.debug(f"{endpoint}: page {page}/{total_pages} ({len(items)} items)")

            for item in items:
                yield item
            page += 1

    def list_collection(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
                        per_page: int = DEFAULT_PER_PAGE) -> List[Dict[str, Any]]:
        return list(self.iter_collection(endpoint, params=params, per_page=per_page))

    def test_connection(self) -> bool:
        """Quick check that the credentials can read the current user."""
        try:
            user = self.get_json('users/me', params={'context': 'edit'})
        except WordPressAPIError as e:
            logger.error(f"Connection test failed: {e}")
            return False
        logger.info(f"Connection test passed (user: {user.get('slug', '?')})")
        return True


def load_app_password(env_file: Optional[str] = None) -> Optional[str]:
    """
    Application password from the environment.

    A .env file (or the given env_file) is loaded first; variables
    already set in the environment win.
    """
    load_dotenv(env_file)
    return os.environ.get(APP_PASSWORD_ENV)


def _error_message(response: requests.Response) -> str:
    # WordPress errors look like {"code": "...", "message": "...", "data": {...}}
    try:
        body = response.json()
    except ValueError:
        return response.text[:300]
    if isinstance(body, dict):
        return body.get('message') or body.get('code') or str(body)[:300]
    return str(body)[:300]
