"""
Local key-value persistence for the user record and keyword projects.

The pipeline reads and writes whole JSON blobs through a minimal key-value
interface. There are no partial updates and no transactions: every save is a
full read-modify-write and the last writer wins.
"""

import json
import logging
import os
import re
import tempfile
import uuid
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from .config import DEFAULT_APP_PREFIX, PipelineConfig
from .errors import StoreError, ValidationError
from .models import KeywordProject, User, now_millis

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Byte-level key-value storage."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process key-value store. Contents are lost when the process ends."""

    def __init__(self):
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore:
    """
    Directory-backed key-value store.

    Each key is stored as ``<root>/<key>.json``. Writes go to a temporary
    file in the same directory which then replaces the target, so a reader
    never sees a half-written blob.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser()

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid store key: '{key}'")
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        self.root.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(dir=self.root, suffix=".tmp", delete=False) as tmp:
            tmp.write(value)
            tmp_path = Path(tmp.name)
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


class ProjectStore:
    """
    Typed accessor for the persisted user and keyword projects.

    Layout: ``"<app>_user"`` holds the User JSON object and
    ``"<app>_projects"`` holds the JSON array of KeywordProject objects.
    """

    def __init__(self, kv: KeyValueStore, app_prefix: str = DEFAULT_APP_PREFIX):
        self.kv = kv
        self.user_key = f"{app_prefix}_user"
        self.projects_key = f"{app_prefix}_projects"

    # -- raw JSON helpers ---------------------------------------------------

    def _read_json(self, key: str) -> Optional[Any]:
        data = self.kv.get(key)
        if data is None:
            return None
        try:
            return json.loads(data.decode("utf-8"))
        except ValueError as e:
            raise StoreError(key, str(e)) from e

    def _write_json(self, key: str, value: Any) -> None:
        self.kv.set(key, json.dumps(value, ensure_ascii=False).encode("utf-8"))

    # -- user ---------------------------------------------------------------

    def get_user(self) -> Optional[User]:
        data = self._read_json(self.user_key)
        if not data:
            return None
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(self.user_key, f"bad user record ({e!r})") from e

    def save_user(self, user: User) -> None:
        self._write_json(self.user_key, user.to_dict())

    def clear_user(self) -> None:
        self.kv.delete(self.user_key)

    # -- projects -----------------------------------------------------------

    def get_projects(self) -> list[KeywordProject]:
        """
        Load every project, in stored order. Empty when nothing is stored.

        Raises:
            StoreError: If the stored blob is not a list of project records.
        """
        data = self._read_json(self.projects_key)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(self.projects_key, "expected a list of projects")
        try:
            return [KeywordProject.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(self.projects_key, f"bad project record ({e!r})") from e

    def get_project(self, project_id: str) -> Optional[KeywordProject]:
        for project in self.get_projects():
            if project.id == project_id:
                return project
        return None

    def save_project(self, project: KeywordProject) -> None:
        """Replace the project with the same id in place, or append it."""
        projects = self.get_projects()
        for index, existing in enumerate(projects):
            if existing.id == project.id:
                projects[index] = project
                break
        else:
            projects.append(project)

        self._write_json(self.projects_key, [p.to_dict() for p in projects])
        logger.debug(f"Saved project {project.id} ({project.keyword_count} keywords)")

    def delete_project(self, project_id: str) -> bool:
        """
        Remove a project by id.

        Returns:
            True if a project was removed.
        """
        projects = self.get_projects()
        remaining = [p for p in projects if p.id != project_id]
        self._write_json(self.projects_key, [p.to_dict() for p in remaining])
        return len(remaining) != len(projects)

    def create_project(self, name: str, domain: str) -> KeywordProject:
        """
        Create and persist an empty project.

        Raises:
            ValidationError: If name or domain is empty.
        """
        name = (name or "").strip()
        domain = (domain or "").strip()
        if not name or not domain:
            raise ValidationError("Project name and domain are required")

        project = KeywordProject(
            id=uuid.uuid4().hex,
            name=name,
            domain=domain,
            keywords=[],
            created_at=now_millis(),
        )
        self.save_project(project)
        logger.info(f"Created project '{name}' for {domain}")
        return project

    def stats(self) -> dict[str, int]:
        """Project and stored keyword counts."""
        projects = self.get_projects()
        return {
            "projects": len(projects),
            "keywords": sum(p.keyword_count for p in projects),
        }


def create_project_store(config: PipelineConfig) -> ProjectStore:
    """Build the file-backed project store described by a config."""
    return ProjectStore(FileStore(config.store_dir), app_prefix=config.app_prefix)
