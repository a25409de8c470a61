from __future__ import annotations

from typing import Dict, List

from .config import (
    ArchitectureDiagramRequirement,
    AzureYamlRules,
    BicepChecks,
    DocumentationRequirement,
    ReadmeRequirements,
    RepositoryManagementChecks,
    RuleSet,
    SecurityBestPractices,
    WorkflowRequirement,
)
from .errors import ConfigurationError

DEFAULT_DEPRECATED_MODELS = (
    "gpt-35-turbo",
    "gpt-3.5-turbo",
    "text-davinci-003",
    "text-davinci-002",
    "code-davinci-002",
    "gpt-4-32k",
)


def _doc(name: str, filename: str) -> DocumentationRequirement:
    escaped = filename.replace(".", r"\.")
    return DocumentationRequirement(
        name=name,
        patterns=(rf"^{escaped}$", rf"^\.github/{escaped}$", rf"^docs/{escaped}$"),
        message=f"Missing required documentation: {filename} (repository root, .github/ or docs/)",
    )


_AZURE_DEV_WORKFLOW = WorkflowRequirement(
    name="azure-dev",
    pattern=r"^\.github/workflows/azure-dev\.ya?ml$",
    message="Missing required GitHub workflow: azure-dev.yml",
)

DOD = RuleSet(
    name="dod",
    description="Definition of Done: full structural, documentation, infrastructure and security checks.",
    required_files=("README.md", "azure.yaml", "LICENSE"),
    required_folders=("infra", "src", ".github"),
    required_workflow_files=(
        _AZURE_DEV_WORKFLOW,
        WorkflowRequirement(
            name="azure-bicep-validate",
            pattern=r"^\.github/workflows/azure-bicep-validate\.ya?ml$",
            message="Missing required GitHub workflow: azure-bicep-validate.yml",
        ),
    ),
    required_documentation=(
        _doc("code-of-conduct", "CODE_OF_CONDUCT.md"),
        _doc("contributing", "CONTRIBUTING.md"),
        _doc("security", "SECURITY.md"),
    ),
    readme_requirements=ReadmeRequirements(
        required_headings=("Features", "Getting Started", "Resources", "Guidance"),
        architecture_diagram=ArchitectureDiagramRequirement(heading="Architecture Diagram", requires_image=True),
    ),
    bicep_checks=BicepChecks(
        require_infra_files=True,
        required_resources=("Microsoft.ManagedIdentity/userAssignedIdentities",),
        security_best_practices=SecurityBestPractices(),
    ),
    azure_yaml_rules=AzureYamlRules(must_define_services=True),
    repository_management=RepositoryManagementChecks(),
    deprecated_models=DEFAULT_DEPRECATED_MODELS,
)

PARTNER = RuleSet(
    name="partner",
    description="Partner templates: lighter structural checks, insecure authentication detection only.",
    required_files=("README.md", "azure.yaml"),
    required_folders=("infra",),
    required_workflow_files=(_AZURE_DEV_WORKFLOW,),
    readme_requirements=ReadmeRequirements(required_headings=("Getting Started",)),
    bicep_checks=BicepChecks(
        require_infra_files=True,
        security_best_practices=SecurityBestPractices(
            detect_managed_identity=False,
            check_anonymous_access=False,
        ),
    ),
    azure_yaml_rules=AzureYamlRules(must_define_services=True),
    repository_management=RepositoryManagementChecks(issue_templates=False),
    deprecated_models=DEFAULT_DEPRECATED_MODELS,
)

CUSTOM = RuleSet(
    name="custom",
    description="Minimal baseline meant to be copied and extended with inline configuration.",
    required_files=("README.md", "azure.yaml"),
    required_folders=("infra",),
    bicep_checks=BicepChecks(),
    azure_yaml_rules=AzureYamlRules(must_define_services=False),
)

_PRESETS: Dict[str, RuleSet] = {
    DOD.name: DOD,
    PARTNER.name: PARTNER,
    CUSTOM.name: CUSTOM,
}


def preset_names() -> List[str]:
    return list(_PRESETS.keys())


def get_preset(name: str) -> RuleSet:
    key = (name or "").strip().lower()
    try:
        return _PRESETS[key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown rule set '{name}'",
            {"ruleSet": name, "available": preset_names()},
        ) from None
