"""
Durable storage backends for the store document.

The profile store writes its whole document through a storage port after
every mutation. Three backends are provided: in-memory (tests and the
default), a local JSON file and a DynamoDB table.

Example:
    # Correct usage
    storage = get_storage()
    store = ProfileStore(storage)

    # Tests inject a backend directly
    store = ProfileStore(InMemoryStorage())
"""
import copy
import json
import os
import tempfile
from typing import Any, Dict, Optional, Protocol
import boto3
from aws_lambda_powertools import Logger

from cyclesync.services.exceptions import StorageError

logger = Logger()

DEFAULT_STORE_KEY = "cyclesync_data_v1"
DEFAULT_DATA_FILE = "cyclesync_data_v1.json"
STORE_DOCUMENT_SK = "DOCUMENT"

# Singleton instance
_storage_instance = None


class StoragePort(Protocol):
    """Interface every storage backend implements."""

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the persisted document, or None if nothing was saved yet."""
        ...

    def save(self, document: Dict[str, Any]) -> None:
        """Persist the whole document, replacing any previous one."""
        ...


class InMemoryStorage:
    """Storage kept in process memory."""

    def __init__(self, document: Optional[Dict[str, Any]] = None):
        self._document = copy.deepcopy(document)
        self.save_count = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._document)

    def save(self, document: Dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)
        self.save_count += 1


class JsonFileStorage:
    """Storage in a local JSON file, replaced atomically on every save."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Read the document from disk.

        Raises:
            StorageError: If the file exists but cannot be read or decoded
        """
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {self.path}: {str(e)}")

    def save(self, document: Dict[str, Any]) -> None:
        """
        Write the document to a temporary file and move it into place.

        Raises:
            StorageError: If the file cannot be written
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {str(e)}")


class DynamoStorage:
    """Storage as a single item in a DynamoDB table."""

    def __init__(self, table_name: str, store_key: str = DEFAULT_STORE_KEY):
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        self.store_key = store_key

    def _key(self) -> Dict[str, str]:
        return {"PK": create_store_pk(self.store_key), "SK": STORE_DOCUMENT_SK}

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Fetch the document item.

        Raises:
            StorageError: If DynamoDB rejects the request or the item is corrupt
        """
        try:
            response = self.table.get_item(Key=self._key())
        except Exception as e:
            logger.error("Error loading store document", extra={
                "store_key": self.store_key,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise StorageError(f"Failed to load store document: {str(e)}")

        item = response.get('Item')
        if not item:
            return None
        try:
            return json.loads(item['document'])
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Stored document is corrupt: {str(e)}")

    def save(self, document: Dict[str, Any]) -> None:
        """
        Put the document item, replacing the previous one.

        Raises:
            StorageError: If DynamoDB rejects the request
        """
        try:
            self.table.put_item(Item={
                **self._key(),
                "document": json.dumps(document, ensure_ascii=False)
            })
        except Exception as e:
            logger.error("Error saving store document", extra={
                "store_key": self.store_key,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise StorageError(f"Failed to save store document: {str(e)}")


def create_store_pk(store_key: str) -> str:
    """Create partition key for a store document."""
    return f"STORE#{store_key}"


def get_storage() -> StoragePort:
    """
    Get or create the process-wide storage backend.

    The backend is chosen by ``CYCLESYNC_STORAGE``: ``memory`` (default),
    ``file`` (path from ``CYCLESYNC_DATA_FILE``) or ``dynamodb`` (table from
    ``TRACKER_TABLE_NAME``, item key from ``CYCLESYNC_STORE_KEY``).

    Returns:
        Singleton storage instance

    Raises:
        EnvironmentError: If the dynamodb backend is selected without a table
            name, or the backend name is unknown
    """
    global _storage_instance
    if _storage_instance is None:
        backend = os.environ.get('CYCLESYNC_STORAGE', 'memory').lower()
        if backend == 'memory':
            _storage_instance = InMemoryStorage()
        elif backend == 'file':
            _storage_instance = JsonFileStorage(
                os.environ.get('CYCLESYNC_DATA_FILE', DEFAULT_DATA_FILE)
            )
        elif backend == 'dynamodb':
            try:
                table_name = os.environ['TRACKER_TABLE_NAME']
            except KeyError:
                raise EnvironmentError(
                    "TRACKER_TABLE_NAME environment variable not set. "
                    "This variable must be set to the DynamoDB table name."
                )
            _storage_instance = DynamoStorage(
                table_name,
                os.environ.get('CYCLESYNC_STORE_KEY', DEFAULT_STORE_KEY)
            )
        else:
            raise EnvironmentError(f"Unknown CYCLESYNC_STORAGE backend: {backend}")
        logger.info("Initialized storage backend", extra={"backend": backend})
    return _storage_instance


def reset_storage() -> None:
    """Drop the cached backend so the next call re-reads the environment."""
    global _storage_instance
    _storage_instance = None
