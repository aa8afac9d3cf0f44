"""Application use cases."""

from src.application.use_cases.hierarchy.hierarchy_lifecycle import \
    HierarchyLifecycle
from src.application.use_cases.hierarchy.project_membership import \
    ProjectMembershipService
from src.application.use_cases.reference_data.reference_data import \
    ReferenceDataService

__all__ = [
    "HierarchyLifecycle",
    "ProjectMembershipService",
    "ReferenceDataService",
]
