from __future__ import annotations

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue
from ..matchers import file_exists, folder_exists
from ..models import CategoryFindings, RepositorySnapshot
from ..registry import register_category

FILES = "files"
FOLDERS = "folders"


@register_category(FILES, order=10)
def evaluate_required_files(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """Required files exist at their exact path."""
    issues, compliant = [], []
    for path in rule_set.required_files:
        if not file_exists(snapshot, path):
            issues.append(
                make_issue(
                    f"missing-file-{path}",
                    FILES,
                    f"Missing required file: {path}",
                    error=f"File {path} not found in repository",
                )
            )
            continue
        details = {"fileName": path}
        content = snapshot.content_for(path)
        if content is not None:
            details["size"] = len(content.encode("utf-8"))
        compliant.append(make_compliant(f"file-{path}", FILES, f"Required file found: {path}", details))
    return CategoryFindings(issues=issues, compliant=compliant)


@register_category(FOLDERS, order=20)
def evaluate_required_folders(
    snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions
) -> CategoryFindings:
    """Required folders contain at least one file (or are listed explicitly)."""
    issues, compliant = [], []
    for folder in rule_set.required_folders:
        if not folder_exists(snapshot, folder):
            issues.append(
                make_issue(
                    f"missing-folder-{folder}",
                    FOLDERS,
                    f"Missing required folder: {folder}/",
                    error=f"Folder {folder} not found in repository",
                )
            )
            continue
        compliant.append(
            make_compliant(
                f"folder-{folder}",
                FOLDERS,
                f"Required folder found: {folder}/",
                {"folderPath": folder, "fileCount": len(snapshot.files_under(folder))},
            )
        )
    return CategoryFindings(issues=issues, compliant=compliant)
