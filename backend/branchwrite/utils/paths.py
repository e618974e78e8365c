"""
Storage root resolution.

The per-user data directory holds two collections:

    <root>/projects/<project_id>/...
    <root>/books/<book_id>/...

``<root>`` is ``~/.branchwrite`` unless overridden by ``BRANCHWRITE_DATA_DIR``
or ``storage.data_dir`` in config.yaml.
"""

from pathlib import Path
from typing import Optional

from branchwrite.config import config_section, settings

PROJECTS_DIRNAME = "projects"
BOOKS_DIRNAME = "books"

_storage_cfg = config_section("storage")
ROOT_DIR_NAME = str(_storage_cfg.get("root_dir_name", ".branchwrite"))


def get_app_data_dir(override: Optional[str] = None) -> Path:
    """Return the storage root; pure function of the home directory and config."""
    explicit = override or settings.data_dir or _storage_cfg.get("data_dir")
    if explicit:
        return Path(explicit).expanduser()
    return Path.home() / ROOT_DIR_NAME


def get_projects_dir(root: Optional[str] = None) -> Path:
    return get_app_data_dir(root) / PROJECTS_DIRNAME


def get_books_dir(root: Optional[str] = None) -> Path:
    return get_app_data_dir(root) / BOOKS_DIRNAME
