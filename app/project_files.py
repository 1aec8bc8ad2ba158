from __future__ import annotations

"""Project file naming and directory listing."""

import os
from pathlib import Path
from typing import List, Union

from models.project import BAKED_SUFFIX, PROJECT_SUFFIX

__all__ = ["PROJECT_SUFFIX", "BAKED_SUFFIX", "is_valid_project_filename", "list_projects"]


def is_valid_project_filename(name: str) -> bool:
    # Suffix check only; the rest of the name is the host's business.
    return str(name).endswith(PROJECT_SUFFIX)


def list_projects(directory: Union[str, Path] = ".") -> List[str]:
    """File names (not paths) of the project files directly inside ``directory``."""
    return sorted(
        entry.name
        for entry in os.scandir(directory)
        if entry.is_file() and is_valid_project_filename(entry.name)
    )
