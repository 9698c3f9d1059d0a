from pathlib import Path

from sem_analysis.core.exceptions import ProjectRootNotFound


def get_project_root_dir() -> Path:
    """Walk up from this file to the directory holding pyproject.toml."""
    current = Path(__file__).parent

    while True:
        candidate = current / "pyproject.toml"
        if candidate.exists():
            return current

        parent = current.parent
        if parent == current:
            raise ProjectRootNotFound

        current = parent
