from __future__ import annotations

from ..config import AnalyzerOptions, RuleSet
from ..findings import make_compliant, make_issue, slugify
from ..matchers import heading_section
from ..models import CategoryFindings, RepositorySnapshot
from ..registry import register_category

README = "readme"


@register_category(README, order=50)
def evaluate_readme(snapshot: RepositorySnapshot, rule_set: RuleSet, options: AnalyzerOptions) -> CategoryFindings:
    """README headings and the architecture diagram section."""
    requirements = rule_set.readme_requirements
    if requirements is None:
        return CategoryFindings()

    path = requirements.path
    content = snapshot.content_for(path)
    if content is None:
        # Heading checks need content; report the single root cause instead of every heading.
        if snapshot.has_file(path):
            issue = make_issue(
                "readme-content-unavailable",
                README,
                f"Could not read {path}; README requirements were not checked",
                error=f"{path} is listed but its content was not provided",
                details={"fileName": path},
            )
        else:
            issue = make_issue(
                "missing-readme",
                README,
                f"Repository is missing {path}",
                error=f"File {path} not found in repository",
                details={"fileName": path},
            )
        return CategoryFindings(issues=[issue])

    diagram = requirements.architecture_diagram
    issues, compliant = [], []
    for heading in requirements.required_headings:
        if diagram is not None and heading.strip() == diagram.heading.strip():
            # Reported once, by the architecture diagram check below.
            continue
        section = heading_section(content, heading)
        slug = slugify(heading)
        if section is None:
            issues.append(
                make_issue(
                    f"readme-missing-section-{slug}",
                    README,
                    f"{path} is missing required heading: {heading}",
                    error=f"{path} does not contain required heading: {heading}",
                    details={"heading": heading},
                )
            )
        else:
            compliant.append(
                make_compliant(
                    f"readme-heading-{slug}",
                    README,
                    f"{path} contains required heading: {heading}",
                    {"heading": heading, "level": section.heading.level, "lineCount": len(section.lines)},
                )
            )

    if diagram is not None:
        section = heading_section(content, diagram.heading)
        if section is None:
            issues.append(
                make_issue(
                    "readme-missing-architecture-diagram-heading",
                    README,
                    f"{path} is missing required heading: {diagram.heading}",
                    error=f"{path} does not contain required heading: {diagram.heading}",
                    details={"heading": diagram.heading},
                )
            )
        else:
            compliant.append(
                make_compliant(
                    "readme-architecture-diagram-heading",
                    README,
                    f"{path} contains required heading: {diagram.heading}",
                    {"heading": diagram.heading, "level": section.heading.level},
                )
            )
            if diagram.requires_image and not section.has_image:
                issues.append(
                    make_issue(
                        "readme-missing-architecture-diagram-image",
                        README,
                        f"{diagram.heading} section does not contain an image",
                        error=f"{path} has a {diagram.heading} heading but no image under it",
                        details={"heading": diagram.heading},
                    )
                )
            elif diagram.requires_image:
                compliant.append(
                    make_compliant(
                        "readme-architecture-diagram-image",
                        README,
                        f"{diagram.heading} section contains an image",
                        {"heading": diagram.heading},
                    )
                )

    return CategoryFindings(issues=issues, compliant=compliant)
