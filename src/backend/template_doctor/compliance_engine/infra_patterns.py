from __future__ import annotations

import re
from typing import List, Pattern, Sequence

_MANAGED_IDENTITY_PATTERNS = [
    re.compile(r"identity:\s*\{\s*type:\s*['\"](SystemAssigned|UserAssigned|SystemAssigned,\s*UserAssigned)['\"]", re.I),
    re.compile(
        r"['\"]identity['\"]\s*:\s*\{\s*['\"]type['\"]\s*:\s*['\"](SystemAssigned|UserAssigned|SystemAssigned,\s*UserAssigned)['\"]",
        re.I,
    ),
    re.compile(r"managedIdentities:\s*\{\s*(systemAssigned:\s*true|userAssignedResourceIds:)", re.I),
    re.compile(r"'Microsoft\.ManagedIdentity/userAssignedIdentities", re.I),
]

_CONNECTION_STRING_PATTERNS = [
    re.compile(
        r"connectionString.*=.*['\"][^'\"]*?(AccountKey=|Password=|pwd=|UserName=|uid=|AccountEndpoint=)[^'\"]*?['\"]",
        re.I,
    ),
    re.compile(
        r"['\"]ConnectionString['\"].*:.*['\"][^'\"]*?(AccountKey=|Password=|pwd=|UserName=|uid=|AccountEndpoint=)[^'\"]*?['\"]",
        re.I,
    ),
]
_ACCESS_KEY_PATTERNS = [
    re.compile(r"(accessKey|primaryKey|secondaryKey)\s*:\s*[^;{}]*listKeys\([^)]*\)", re.I),
    re.compile(r"['\"](accessKey|primaryKey|secondaryKey)['\"].*:.*listKeys\([^)]*\)", re.I),
]
_SAS_TOKEN_PATTERNS = [
    re.compile(r"sasToken\s*:", re.I),
    re.compile(r"['\"]sasToken['\"].*:", re.I),
    re.compile(r"sharedAccessSignature\s*:", re.I),
    re.compile(r"SharedAccessKey\s*:", re.I),
]
_STORAGE_KEY_PATTERNS = [
    re.compile(r"storageAccountKey\s*:", re.I),
    re.compile(r"['\"]storageAccountKey['\"].*:", re.I),
    re.compile(r"listKeys\s*\([^)]*['\"]Microsoft\.Storage/storageAccounts", re.I),
]

_RESOURCE_BLOCK_RE = re.compile(r"resource\s+\w+\s+'[^']*'\s*[^{]*\{[^}]*\}", re.I | re.S)
_KEY_VAULT_SECRET_PATTERNS = [re.compile(r"keyVault.*/secrets/", re.I), re.compile(r"['\"]secretUri['\"]", re.I)]
_IDENTITY_PATTERNS = [re.compile(r"identity\s*:", re.I), re.compile(r"identity\s*\{", re.I)]

_SENSITIVE_RESOURCES = [
    ("Key Vault", re.compile(r"Microsoft\.KeyVault/vaults", re.I)),
    ("Container Registry", re.compile(r"Microsoft\.ContainerRegistry/registries", re.I)),
]

CONNECTION_STRING = "Connection String with credentials"
ACCESS_KEY = "Access Key"
KEY_VAULT_SECRET = "KeyVault Secret without Managed Identity"
SAS_TOKEN = "SAS Token"
STORAGE_ACCOUNT_KEY = "Storage Account Key"


def _in_comment(text: str, index: int) -> bool:
    line_start = text.rfind("\n", 0, index) + 1
    if text[line_start:index].lstrip().startswith("//"):
        return True
    return text.rfind("/*", 0, index) > text.rfind("*/", 0, index)


def _matches_outside_comment(patterns: Sequence[Pattern[str]], text: str) -> bool:
    for pattern in patterns:
        for match in pattern.finditer(text):
            if not _in_comment(text, match.start()):
                return True
    return False


def uses_managed_identity(text: str) -> bool:
    return any(p.search(text) for p in _MANAGED_IDENTITY_PATTERNS)


def detect_auth_methods(text: str) -> List[str]:
    """Credential-based authentication patterns found in an infra file, once per kind."""
    methods: List[str] = []
    if _matches_outside_comment(_CONNECTION_STRING_PATTERNS, text):
        methods.append(CONNECTION_STRING)
    if _matches_outside_comment(_ACCESS_KEY_PATTERNS, text):
        methods.append(ACCESS_KEY)
    for block in _RESOURCE_BLOCK_RE.findall(text):
        references_secret = any(p.search(block) for p in _KEY_VAULT_SECRET_PATTERNS)
        if references_secret and not any(p.search(block) for p in _IDENTITY_PATTERNS):
            methods.append(KEY_VAULT_SECRET)
            break
    if _matches_outside_comment(_SAS_TOKEN_PATTERNS, text):
        methods.append(SAS_TOKEN)
    if _matches_outside_comment(_STORAGE_KEY_PATTERNS, text):
        methods.append(STORAGE_ACCOUNT_KEY)
    return methods


def detect_auth_sensitive_resources(text: str) -> List[str]:
    return [name for name, pattern in _SENSITIVE_RESOURCES if pattern.search(text)]
