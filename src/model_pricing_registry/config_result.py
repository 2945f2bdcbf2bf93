"""Pricing source reading result object.

Reading a candidate pricing or overrides file never raises; the outcome,
including which file was tried and how it was parsed, is reported through
:class:`ConfigResult` so the loader can move on to the next candidate.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

YAML_SUFFIXES = (".yaml", ".yml")


def detect_source_format(path: str) -> str:
    """Return ``"yaml"`` for .yaml/.yml files and ``"json"`` for anything else."""
    return "yaml" if Path(path).suffix.lower() in YAML_SUFFIXES else "json"


@dataclass
class ConfigResult:
    """Result of reading a pricing source or overrides file.

    Attributes:
        success: Whether the file was read and parsed into a mapping
        data: Parsed document (if successful)
        error: Error message (if unsuccessful)
        exception: Original exception (if an error occurred)
        path: Candidate file that was tried
        source_format: ``"json"`` or ``"yaml"``, as chosen from the file suffix
    """

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    exception: Optional[Exception] = None
    path: Optional[str] = None
    source_format: Optional[str] = None

    @property
    def entry_count(self) -> int:
        """Number of top-level entries in the parsed document, 0 on failure."""
        return len(self.data) if self.data else 0

    def describe(self) -> str:
        """One-line summary used in load diagnostics."""
        if self.success:
            return f"{self.path} ({self.source_format}, {self.entry_count} entries)"
        return f"{self.path}: {self.error}"
