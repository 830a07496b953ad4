"""Repository validation checks for HACS repositories."""

from .config import Settings
from .context import CheckContext, RepositoryFiles, RunContext, load_repository_files
from .defaults import build_default_registry, default_registry
from .executor import run_check
from .models import CheckOutcome, OutcomeStatus, RunReport, RunSummary
from .orchestrator import run_group, run_groups, validate_repository
from .registry import CheckDefinition, CheckGroup, CheckRegistry, ContextStrategy
from .reporting import Reporter, publish_report, report_to_dict
from .responses import CheckMessage

__all__ = [
    "CheckContext",
    "CheckDefinition",
    "CheckGroup",
    "CheckMessage",
    "CheckOutcome",
    "CheckRegistry",
    "ContextStrategy",
    "OutcomeStatus",
    "Reporter",
    "RepositoryFiles",
    "RunContext",
    "RunReport",
    "RunSummary",
    "Settings",
    "build_default_registry",
    "default_registry",
    "load_repository_files",
    "publish_report",
    "report_to_dict",
    "run_check",
    "run_group",
    "run_groups",
    "validate_repository",
]
