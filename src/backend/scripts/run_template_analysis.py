from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _write_markdown(result, out_path: Path) -> None:
    report = result.compliance
    lines = [
        f"# Template Compliance: {result.repo_url or 'local snapshot'}",
        "",
        f"Rule set: {result.rule_set}",
        f"Generated at: {result.timestamp.isoformat()}",
        "",
        f"**{report.summary}**",
        "",
        "## Categories",
    ]
    for name, category in report.categories.items():
        state = f"{category.percentage}%" if category.enabled else "skipped"
        lines.append(
            f"- {name}: {state} ({len(category.compliant)} passed, {len(category.issues)} issue(s))"
        )
    lines.append("")
    lines.append("## Issues")
    if not report.issues:
        lines.append("")
        lines.append("None.")
    for issue in report.issues:
        lines.append("")
        marker = " [security]" if issue.security_issue else ""
        lines.append(f"### {issue.id} - {issue.severity.value}{marker}")
        lines.append(issue.message)
        if issue.error and issue.error != issue.message:
            lines.append(f"- Error: {issue.error}")
        if issue.recommendation:
            lines.append(f"- Recommendation: {issue.recommendation}")
        if issue.details:
            lines.append("- Details:")
            for key, value in issue.details.items():
                lines.append(f"  - {key}: {value}")
    lines.append("")
    lines.append("## Passed")
    for item in report.compliant:
        lines.append(f"- {item.id}: {item.message}")
    out_path.write_text("\n".join(lines) + "\n")


def run_template_analysis(args: argparse.Namespace):
    _ensure_backend_on_path()
    from template_doctor.compliance_engine import ComplianceAnalyzer
    from template_doctor.pipelines.local_snapshot import LocalSnapshotSource, load_snapshot_file
    from template_doctor.settings import get_settings

    if args.snapshot:
        snapshot = load_snapshot_file(Path(args.snapshot))
    else:
        snapshot = LocalSnapshotSource(Path(args.repo_path)).load()

    settings = get_settings()
    options = settings.to_options(
        rule_set=args.rule_set,
        categories=[c.strip() for c in args.categories.split(",") if c.strip()] if args.categories else None,
        repo_url=args.repo_url or "",
    )
    return ComplianceAnalyzer().analyze(snapshot, options)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run template compliance analysis against a local checkout or a JSON snapshot."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--repo-path",
        help="Path to a local repository checkout.",
    )
    source.add_argument(
        "--snapshot",
        help="Path to a JSON snapshot ({files, folders, contents}).",
    )
    parser.add_argument(
        "--rule-set",
        default=None,
        help="Rule set preset (dod, partner, custom). Defaults to TEMPLATE_DOCTOR_DEFAULT_RULESET or dod.",
    )
    parser.add_argument(
        "--categories",
        default=None,
        help="Comma-separated categories to run (defaults to all).",
    )
    parser.add_argument(
        "--repo-url",
        default=None,
        help="Repository URL recorded in the result.",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Write the JSON result here instead of stdout.",
    )
    parser.add_argument(
        "--markdown",
        default=None,
        help="Also write a Markdown summary to this path.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args(argv)

    _ensure_backend_on_path()
    from template_doctor.compliance_engine.errors import AnalysisError
    from template_doctor.log import configure_logging
    from template_doctor.settings import get_settings

    configure_logging(verbose=args.verbose, level=get_settings().log_level)

    try:
        result = run_template_analysis(args)
    except AnalysisError as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2

    payload = json.dumps(result.to_json_dict(), indent=2)
    if args.out:
        out_json = Path(args.out)
        out_json.parent.mkdir(parents=True, exist_ok=True)
        out_json.write_text(payload)
        print(f"Wrote {out_json}")
    else:
        print(payload)

    if args.markdown:
        out_md = Path(args.markdown)
        out_md.parent.mkdir(parents=True, exist_ok=True)
        _write_markdown(result, out_md)
        print(f"Wrote {out_md}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
