"""Configuration path handling for the pricing registry.

This module resolves where pricing data and overrides are read from, following
the XDG Base Directory Specification (via platformdirs) for user data files.
"""

import os
from pathlib import Path
from typing import List, Optional

import platformdirs

# Application name used for directory paths
APP_NAME = "model-pricing-registry"

# Environment variable names
ENV_PRICING_PATH = "MPR_PRICING_PATH"
ENV_OVERRIDES_PATH = "MPR_OVERRIDES_PATH"
ENV_DATA_DIR = "MPR_DATA_DIR"

# Default filenames
PRICING_FILENAME = "model_prices_and_context_window.json"
OVERRIDES_FILENAME = "overrides.yaml"


def get_package_data_dir() -> Path:
    """Get the path to the package's bundled data directory."""
    return Path(__file__).parent / "data"


def get_user_data_dir() -> Path:
    """Get the user data directory, respecting the MPR_DATA_DIR override."""
    custom_dir = os.environ.get(ENV_DATA_DIR)
    if custom_dir:
        return Path(custom_dir)
    return Path(platformdirs.user_data_dir(APP_NAME))


def get_bundled_pricing_path() -> Path:
    """Get the path of the pricing file shipped with the package."""
    return get_package_data_dir() / PRICING_FILENAME


def get_pricing_path_candidates(explicit_path: Optional[str] = None) -> List[str]:
    """List pricing file locations in lookup order.

    Order: explicit path, MPR_PRICING_PATH, user data directory, current
    working directory, bundled package file. Duplicates are dropped.

    Args:
        explicit_path: Path passed in by the caller, if any

    Returns:
        Candidate file paths, most specific first
    """
    candidates: List[str] = []
    if explicit_path:
        candidates.append(str(explicit_path))

    env_path = os.environ.get(ENV_PRICING_PATH)
    if env_path:
        candidates.append(env_path)

    candidates.append(str(get_user_data_dir() / PRICING_FILENAME))
    candidates.append(str(Path.cwd() / PRICING_FILENAME))
    candidates.append(str(get_bundled_pricing_path()))

    seen = set()
    ordered = []
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            ordered.append(candidate)
    return ordered


def get_overrides_path(explicit_path: Optional[str] = None) -> Optional[str]:
    """Get the path to the pricing overrides file, if one exists.

    Args:
        explicit_path: Path passed in by the caller, if any

    Returns:
        Path to an existing overrides file, or None
    """
    # 1. Explicit path is returned as-is so a missing file can be reported
    if explicit_path:
        return str(explicit_path)

    # 2. Check environment variable
    env_path = os.environ.get(ENV_OVERRIDES_PATH)
    if env_path and Path(env_path).is_file():
        return env_path

    # 3. Check user data directory
    user_path = get_user_data_dir() / OVERRIDES_FILENAME
    if user_path.is_file():
        return str(user_path)

    return None
