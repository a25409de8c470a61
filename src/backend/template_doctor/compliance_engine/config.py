from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import field_validator

from .models import FrozenModel

# Rule sets are shared process-wide (presets), so every collection on them is a tuple.


class WorkflowRequirement(FrozenModel):
    # Regex searched against each file path (case-insensitive).
    pattern: str
    # Author-supplied failure message, reported verbatim.
    message: str
    name: Optional[str] = None

    @property
    def key(self) -> str:
        return self.name or self.pattern


class DocumentationRequirement(FrozenModel):
    name: str
    # Any one of these patterns matching a path satisfies the requirement.
    patterns: Tuple[str, ...] = ()
    message: str


class ArchitectureDiagramRequirement(FrozenModel):
    heading: str = "Architecture Diagram"
    requires_image: bool = True


class ReadmeRequirements(FrozenModel):
    path: str = "README.md"
    required_headings: Tuple[str, ...] = ()
    architecture_diagram: Optional[ArchitectureDiagramRequirement] = None


class SecurityBestPractices(FrozenModel):
    detect_managed_identity: bool = True
    detect_insecure_auth: bool = True
    check_anonymous_access: bool = True


class BicepChecks(FrozenModel):
    infra_folder: str = "infra"
    file_extensions: Tuple[str, ...] = (".bicep",)
    # Report an error when no infra file with one of the extensions is listed.
    require_infra_files: bool = False
    # Resource type prefixes, e.g. "Microsoft.ManagedIdentity/userAssignedIdentities".
    required_resources: Tuple[str, ...] = ()
    # None disables the security category for this rule set.
    security_best_practices: Optional[SecurityBestPractices] = None


class AzureYamlRules(FrozenModel):
    must_define_services: bool = True
    manifest_paths: Tuple[str, ...] = ("azure.yaml", "azure.yml")


class RepositoryManagementChecks(FrozenModel):
    issue_templates: bool = True
    dev_container: bool = True
    # Only checked when the devcontainer.json content is available.
    dev_container_requires_azd: bool = True


DEFAULT_MODEL_REFERENCE_GLOBS = (
    "azure.yaml",
    "azure.yml",
    "infra/*",
    "*.json",
    "*.env",
    "*.env.sample",
    "*.yaml",
    "*.yml",
    "*.py",
    "*.js",
    "*.ts",
    "*.cs",
    "*.ipynb",
)


class RuleSet(FrozenModel):
    """Compliance contract for a template repository.

    `bicep_checks` and `azure_yaml_rules` are optional at the type level so that inline
    configs can be validated; the analyzer rejects a rule set where either is missing.
    `repository_management` is genuinely optional: None skips that category.
    """

    name: str = "custom"
    description: str = ""
    required_files: Tuple[str, ...] = ()
    required_folders: Tuple[str, ...] = ()
    required_workflow_files: Tuple[WorkflowRequirement, ...] = ()
    required_documentation: Tuple[DocumentationRequirement, ...] = ()
    readme_requirements: Optional[ReadmeRequirements] = None
    bicep_checks: Optional[BicepChecks] = None
    azure_yaml_rules: Optional[AzureYamlRules] = None
    repository_management: Optional[RepositoryManagementChecks] = None
    deprecated_models: Tuple[str, ...] = ()
    model_reference_globs: Tuple[str, ...] = DEFAULT_MODEL_REFERENCE_GLOBS

    def missing_sections(self) -> List[str]:
        missing = []
        if self.bicep_checks is None:
            missing.append("bicepChecks")
        if self.azure_yaml_rules is None:
            missing.append("azureYamlRules")
        return missing


class AnalyzerOptions(FrozenModel):
    rule_set: Union[str, RuleSet, Dict[str, Any]] = "dod"
    # None means every registered category.
    categories: Optional[List[str]] = None
    repo_url: str = ""
    # Overrides RuleSet.deprecated_models when set (e.g. from DEPRECATED_MODELS).
    deprecated_models: Optional[List[str]] = None
    ai_deprecation_check_enabled: bool = True
    azure_developer_cli_enabled: bool = True

    @field_validator("categories", mode="before")
    @classmethod
    def _split_categories(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [c.strip() for c in value.split(",") if c.strip()]
        return value
