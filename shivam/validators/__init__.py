"""Generated-project validation."""

from shivam.validators.project import (
    ProjectIssue,
    extract_imports,
    extract_sibling_imports,
    print_validation_issues,
    validate_project,
)

__all__ = [
    "ProjectIssue",
    "extract_imports",
    "extract_sibling_imports",
    "print_validation_issues",
    "validate_project",
]
