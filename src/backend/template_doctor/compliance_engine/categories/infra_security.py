from __future__ import annotations

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue
from ..infra_patterns import detect_auth_methods, detect_auth_sensitive_resources, uses_managed_identity
from ..models import CategoryFindings, RepositorySnapshot, Severity
from ..registry import register_category

SECURITY = "security"

_SENSITIVE_RESOURCE_CHECKS = {
    "Key Vault": ("keyVault", "SEC-KV-001"),
    "Container Registry": ("containerRegistry", "SEC-ACR-001"),
}


@register_category(SECURITY, order=70)
def evaluate_infra_security(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """Authentication best practices in infra files (Managed Identity over keys and secrets)."""
    practices = rule_set.bicep_checks.security_best_practices
    if practices is None:
        return CategoryFindings(skipped=True)

    checks = rule_set.bicep_checks
    issues, compliant = [], []
    for path, text in snapshot.infra_files(checks.infra_folder, checks.file_extensions).items():
        has_identity = uses_managed_identity(text)
        if practices.detect_managed_identity and has_identity:
            compliant.append(
                make_compliant(
                    f"bicep-uses-managed-identity-{path}",
                    SECURITY,
                    f"{path} uses Managed Identity for Azure authentication",
                    {"file": path, "authMethod": "ManagedIdentity"},
                )
            )

        methods = detect_auth_methods(text) if practices.detect_insecure_auth else []
        if methods:
            listed = ", ".join(methods)
            issues.append(
                make_issue(
                    f"bicep-alternative-auth-{path}",
                    SECURITY,
                    f"SEC-AUTH-001: Detected {listed} in {path}",
                    error=f"File {path} uses {listed} for authentication which may expose secrets",
                    severity=Severity.WARNING,
                    details={"file": path, "code": "SEC-AUTH-001", "methods": methods},
                    recommendation=f"Replace {listed} with Managed Identity or Key Vault references.",
                    security=True,
                )
            )

        if not practices.check_anonymous_access or has_identity:
            continue
        for resource in detect_auth_sensitive_resources(text):
            key, code = _SENSITIVE_RESOURCE_CHECKS[resource]
            issues.append(
                make_issue(
                    f"bicep-missing-auth-{key}-{path}",
                    SECURITY,
                    f"{code}: {resource} found without Managed Identity in {path}",
                    error=f"{resource} in {path} does not appear to be accessed with Managed Identity",
                    severity=Severity.WARNING,
                    details={"file": path, "code": code, "resource": resource},
                    recommendation=f"Add Managed Identity configuration for secure {resource} access.",
                    security=True,
                )
            )
    return CategoryFindings(issues=issues, compliant=compliant)
