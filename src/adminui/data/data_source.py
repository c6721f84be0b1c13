"""Data source abstraction for the admin table.

Provides an abstract base class and implementations for loading the
member list, either from the HTTP endpoint or from a local JSON file.
Sources are read-only; edits never leave the in-memory store.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import requests

from ..models.constants import DATA_URL, FETCH_TIMEOUT
from ..models.user_record import UserRecord
from ..utils.debug_trace import logger


class DataSourceError(Exception):
    """The member list could not be loaded."""


class PayloadError(DataSourceError):
    """The member list was loaded but is not a valid list of records."""


def parse_users(payload: Any) -> list[UserRecord]:
    """Convert a decoded JSON payload into records.

    Args:
        payload: Decoded JSON; must be a list of member objects.

    Returns:
        Records in payload order.

    Raises:
        PayloadError: If the payload is not a list, an entry is malformed,
            or two entries share an id.
    """
    if not isinstance(payload, list):
        raise PayloadError(f"Expected a JSON array, got {type(payload).__name__}")

    records: list[UserRecord] = []
    seen: set[int] = set()
    for index, item in enumerate(payload):
        try:
            record = UserRecord.from_dict(item)
        except ValueError as e:
            raise PayloadError(f"Entry {index}: {e}") from e
        if record.id in seen:
            raise PayloadError(f"Entry {index}: duplicate id {record.id}")
        seen.add(record.id)
        records.append(record)

    return records


class DataSource(ABC):
    """Abstract base class for member data sources."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Where the data comes from (URL or file path), for display and logs."""

    @abstractmethod
    def load_all_users(self) -> list[UserRecord]:
        """Load every member record.

        Raises:
            DataSourceError: If the data cannot be fetched or parsed.
        """


class HttpDataSource(DataSource):
    """Member list served as a JSON array over unauthenticated HTTP GET."""

    def __init__(self, url: str = DATA_URL, timeout: float = FETCH_TIMEOUT):
        """Initialize the HTTP data source.

        Args:
            url: Endpoint returning the JSON array.
            timeout: Seconds before the request is abandoned.
        """
        self._url = url
        self._timeout = timeout

    @property
    def location(self) -> str:
        return self._url

    def load_all_users(self) -> list[UserRecord]:
        logger.info(f"Fetching members from {self._url}")
        try:
            response = requests.get(self._url, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.JSONDecodeError as e:
            # Subclass of RequestException, so it must come first
            raise PayloadError(f"Response from {self._url} is not valid JSON: {e}") from e
        except requests.exceptions.Timeout as e:
            raise DataSourceError(f"Request to {self._url} timed out") from e
        except requests.exceptions.RequestException as e:
            # Connection errors and HTTP error statuses
            raise DataSourceError(f"Could not load {self._url}: {e}") from e

        records = parse_users(payload)
        logger.info(f"Fetched {len(records)} members")
        return records


class JsonFileDataSource(DataSource):
    """Member list stored in a local JSON file with the endpoint's format."""

    def __init__(self, path: str | Path):
        """Initialize the file data source.

        Args:
            path: Path to a JSON file holding the member array.
        """
        self._path = Path(path)

    @property
    def location(self) -> str:
        return str(self._path)

    def load_all_users(self) -> list[UserRecord]:
        logger.info(f"Loading members from {self._path}")
        try:
            with open(self._path, encoding="utf-8") as f:
                payload = json.load(f)
        except OSError as e:
            raise DataSourceError(f"Could not read {self._path}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PayloadError(f"{self._path} is not valid UTF-8 JSON: {e}") from e

        records = parse_users(payload)
        logger.info(f"Loaded {len(records)} members")
        return records
