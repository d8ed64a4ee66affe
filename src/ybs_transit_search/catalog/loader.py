"""Loading stop and route catalogs from local files or over HTTP."""

import json
import logging
import pathlib
from typing import Any

import requests
from pydantic import ValidationError as PydanticValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.exceptions import CatalogError, NetworkError
from ..core.models import IndexSnapshot

logger = logging.getLogger(__name__)

ROUTE_FILE_PATTERN = "route*.json"

DEFAULT_STOPS_PATH = "data/stops.json"
DEFAULT_ROUTES_PATH = "data/routes"
DEFAULT_SNAPSHOT_PATH = "data/route_index.json"


def _is_url(source: str | pathlib.Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


class CatalogLoader:
    """Reads the stop catalog, route catalog and index snapshots."""

    def __init__(self, timeout: int = 30):
        """Initialize the loader.

        Args:
            timeout: Request timeout in seconds for remote catalogs
        """
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": "ybs-transit-search/0.1.0",
                "Accept": "application/json",
            }
        )

    def load_stops(self, source: str | pathlib.Path) -> dict[str, Any]:
        """Load the stop catalog.

        Args:
            source: Path or URL of a JSON object keyed by stop id, or of a
                JSON list of records carrying an ``id`` field

        Returns:
            Mapping of stop id to stop record

        Raises:
            CatalogError: If the catalog cannot be read or has the wrong shape
            NetworkError: If a remote catalog cannot be fetched
        """
        data = self._read_json(source)

        if isinstance(data, list):
            data = {
                str(record["id"]): record
                for record in data
                if isinstance(record, dict) and record.get("id") is not None
            }
        if not isinstance(data, dict):
            raise CatalogError(f"Stop catalog {source} must be a JSON object or list")

        logger.info(f"Loaded {len(data)} stop records from {source}")
        return data

    def load_routes(self, source: str | pathlib.Path) -> list[Any]:
        """Load the route catalog.

        Args:
            source: Path or URL of a JSON list of routes, or a directory of
                ``route*.json`` files holding one route each

        Returns:
            List of route records

        Raises:
            CatalogError: If the catalog cannot be read or has the wrong shape
            NetworkError: If a remote catalog cannot be fetched
        """
        if not _is_url(source) and pathlib.Path(source).is_dir():
            routes = self._load_route_directory(pathlib.Path(source))
        else:
            data = self._read_json(source)
            if isinstance(data, dict) and isinstance(data.get("routes"), list):
                data = data["routes"]
            if not isinstance(data, list):
                raise CatalogError(f"Route catalog {source} must be a JSON list")
            routes = data

        logger.info(f"Loaded {len(routes)} route records from {source}")
        return routes

    def _load_route_directory(self, directory: pathlib.Path) -> list[Any]:
        routes = []
        for route_file in sorted(directory.glob(ROUTE_FILE_PATTERN)):
            try:
                record = self._read_json(route_file)
            except CatalogError as e:
                logger.warning(f"Skipping route file {route_file.name}: {e}")
                continue

            if isinstance(record, dict):
                record.setdefault("file", route_file.name)
            routes.append(record)
        return routes

    def _read_json(self, source: str | pathlib.Path) -> Any:
        if _is_url(source):
            return self._fetch_json(str(source))

        path = pathlib.Path(source)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise CatalogError(f"Failed to read {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in {path}: {e}") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type(NetworkError),
        reraise=True,
    )
    def _fetch_json(self, url: str) -> Any:
        """Fetch a JSON document.

        Raises:
            CatalogError: On client errors or an invalid body
            NetworkError: On connection failures and server errors
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Failed to fetch catalog: {str(e)}") from e

        if response.status_code >= 500:
            raise NetworkError(f"Catalog server error {response.status_code} for {url}")
        if response.status_code >= 400:
            raise CatalogError(f"Catalog not available ({response.status_code}): {url}")

        try:
            return response.json()
        except ValueError as e:
            raise CatalogError(f"Invalid JSON from {url}: {e}") from e

    def save_snapshot(self, snapshot: IndexSnapshot, file_path: pathlib.Path) -> None:
        """Save a route index snapshot to a JSON file.

        Args:
            snapshot: Exported index snapshot
            file_path: Path to JSON file
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(snapshot.model_dump_json(indent=2))

        logger.info(f"Saved index snapshot of {len(snapshot.stop_to_routes)} stops to {file_path}")

    def load_snapshot(self, file_path: pathlib.Path) -> IndexSnapshot:
        """Load a route index snapshot from a JSON file.

        Raises:
            CatalogError: If the file is missing or not a valid snapshot
        """
        data = self._read_json(file_path)
        try:
            snapshot = IndexSnapshot.model_validate(data)
        except PydanticValidationError as e:
            raise CatalogError(f"Invalid index snapshot {file_path}: {e}") from e

        logger.info(f"Loaded index snapshot of {len(snapshot.stop_to_routes)} stops from {file_path}")
        return snapshot
