"""
Goal bank loader for speechtrack.

Loads YAML goal banks from the package data/ directory.
"""

from pathlib import Path
from typing import Any
import yaml

from speechtrack.schemas import Category


# Bundled goal bank (inside the package)
DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_GOAL_BANK = DATA_DIR / "goal_bank.yaml"


def load_goal_bank(path: Path | None = None) -> dict[str, Any]:
    """
    Load a goal bank YAML file.

    Args:
        path: Optional custom goal bank file (default: bundled goal_bank.yaml)

    Returns:
        Dict containing the parsed YAML with keys:
        - meta: version, source
        - categories: list of {id, title, goals: [{id, title}]}

    Raises:
        FileNotFoundError: If the goal bank file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    file_path = Path(path) if path else DEFAULT_GOAL_BANK

    if not file_path.exists():
        raise FileNotFoundError(f"Goal bank not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_categories(data: dict[str, Any]) -> list[Category]:
    """Validate the categories section of a parsed goal bank."""
    raw = data.get("categories") or []
    return [Category.model_validate(entry) for entry in raw]


def get_available_goal_banks(data_dir: Path | None = None) -> list[str]:
    """
    List goal bank files shipped in a data directory.

    Returns:
        List of goal bank names (without .yaml extension)
    """
    dir_path = data_dir or DATA_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))
