"""Runtime utilities for output paths, input validation, and versioning."""

from .output import export_output_path, setup_output_directory
from .validation import validate_input_paths
from .version import resolve_project_version

__all__ = [
    "export_output_path",
    "resolve_project_version",
    "setup_output_directory",
    "validate_input_paths",
]
