"""Services for project business logic."""

from .exceptions import (
    ProjectsServiceError,
    ProjectNotFoundError,
    InvalidProjectError,
    BlockedOperationError,
)
from .project_management import (
    project_store,
    create_project,
    get_project_by_id,
    list_projects,
    update_project,
    delete_project,
)
from .po_resolution import (
    POResolution,
    normalize_active_pos,
    eligible_pos,
    resolve_default_po,
    resolve_po,
)
from .budget import (
    BudgetCheck,
    check_budget,
    get_budget_summary,
)
from .aggregates import (
    expected_aggregates,
    recompute_project_aggregates,
)

__all__ = [
    # Exceptions
    'ProjectsServiceError',
    'ProjectNotFoundError',
    'InvalidProjectError',
    'BlockedOperationError',
    # Project management
    'project_store',
    'create_project',
    'get_project_by_id',
    'list_projects',
    'update_project',
    'delete_project',
    # PO resolution
    'POResolution',
    'normalize_active_pos',
    'eligible_pos',
    'resolve_default_po',
    'resolve_po',
    # Budget
    'BudgetCheck',
    'check_budget',
    'get_budget_summary',
    # Aggregates
    'expected_aggregates',
    'recompute_project_aggregates',
]
