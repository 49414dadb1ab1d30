"""Contains utility functions for working with YAML documents."""

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

yaml = YAML(typ="safe")


def load_yaml_text(text: str) -> Any:
    """Parses a YAML document from a string.

    Returns None for an empty document. Parse failures raise ruamel's YAMLError.
    """
    return yaml.load(text)


def load_yaml_file(path: Path) -> Any:
    """Loads a YAML file and returns its parsed content."""
    with open(path, encoding="utf-8") as f:
        return yaml.load(f)
