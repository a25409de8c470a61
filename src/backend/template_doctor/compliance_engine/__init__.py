"""Source-agnostic compliance engine for template repositories.

This package intentionally contains only domain logic:
- Inputs are a repository snapshot (paths + selected contents) and a rule set.
- No cloning, GitHub API, or network calls live here.
"""

from .analyzer import ComplianceAnalyzer, analyze
from .config import (
    AnalyzerOptions,
    AzureYamlRules,
    BicepChecks,
    DocumentationRequirement,
    ReadmeRequirements,
    RuleSet,
    SecurityBestPractices,
    WorkflowRequirement,
)
from .errors import AnalysisError, ConfigurationError, InputError
from .models import (
    AnalysisResult,
    CategoryFindings,
    CategoryResult,
    ComplianceReport,
    CompliantItem,
    Issue,
    RepositorySnapshot,
    Severity,
)
from .presets import get_preset, preset_names

# Import built-in categories so they self-register with the global registry.
from . import categories as _builtin_categories  # noqa: F401
