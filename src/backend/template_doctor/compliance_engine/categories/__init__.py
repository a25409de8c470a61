from .structure import FILES, FOLDERS, evaluate_required_files, evaluate_required_folders
from .workflows import WORKFLOWS, evaluate_workflows
from .documentation import DOCUMENTATION, evaluate_documentation
from .repository_management import REPOSITORY_MANAGEMENT, evaluate_repository_management
from .readme import README, evaluate_readme
from .infra import INFRA, evaluate_infra_resources
from .infra_security import SECURITY, evaluate_infra_security
from .service_definition import SERVICE_DEFINITION, evaluate_service_definition
from .deprecated_models import DEPRECATED_MODELS, evaluate_deprecated_models

__all__ = [
    "FILES",
    "FOLDERS",
    "WORKFLOWS",
    "DOCUMENTATION",
    "REPOSITORY_MANAGEMENT",
    "README",
    "INFRA",
    "SECURITY",
    "SERVICE_DEFINITION",
    "DEPRECATED_MODELS",
    "evaluate_required_files",
    "evaluate_required_folders",
    "evaluate_workflows",
    "evaluate_documentation",
    "evaluate_repository_management",
    "evaluate_readme",
    "evaluate_infra_resources",
    "evaluate_infra_security",
    "evaluate_service_definition",
    "evaluate_deprecated_models",
]
