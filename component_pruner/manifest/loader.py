"""Load desired manifests from YAML files.

Layout accepted by `load_component_manifests`:
    manifests/
        gateway.yaml          -> component "gateway"
        pilot/                -> component "pilot"
            deployment.yaml
            service.yml
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def load_manifests(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load every object from a multi-document YAML file or directory.

    Empty documents are skipped and `List` objects are flattened into their
    items.

    Args:
        path: YAML file or directory of YAML files

    Returns:
        List of manifest dictionaries

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If a document is not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Manifest path not found: {path}")

    if path.is_dir():
        files = sorted(p for p in path.rglob("*") if p.suffix in YAML_SUFFIXES)
    else:
        files = [path]

    manifests: List[Dict[str, Any]] = []
    for file_path in files:
        with open(file_path, "r") as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                if not isinstance(doc, dict):
                    raise ValueError(f"Expected a mapping in {file_path}, got {type(doc).__name__}")
                if str(doc.get("kind") or "").endswith("List") and "items" in doc:
                    manifests.extend(item for item in doc["items"] or [] if item)
                else:
                    manifests.append(doc)

    logger.debug(f"Loaded {len(manifests)} manifests from {path}")
    return manifests


def load_component_manifests(path: Union[str, Path]) -> Dict[str, List[Dict[str, Any]]]:
    """Load manifests grouped by component name.

    Args:
        path: Directory where each YAML file or sub-directory is one component

    Returns:
        Mapping of component name to its manifests, in name order
    """
    path = Path(path)
    if not path.is_dir():
        raise NotADirectoryError(f"Manifest directory not found: {path}")

    components: Dict[str, List[Dict[str, Any]]] = {}
    for entry in sorted(path.iterdir()):
        if entry.is_dir():
            components[entry.name] = load_manifests(entry)
        elif entry.suffix in YAML_SUFFIXES:
            components[entry.stem] = load_manifests(entry)

    return components
