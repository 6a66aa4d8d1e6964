from __future__ import annotations

from typing import Any

from resultlens.domain.models import NavigationTarget, ResultNode, SeverityHint
from .base import FormatParser, MalformedDocument
from .util import as_int, basename, group_by, truncate

SECRET_DISPLAY_LENGTH = 40


class GitLeaksParser(FormatParser):
    id = "gitleaks"
    name = "GitLeaks"

    def can_handle(self, filename: str, doc: Any) -> bool:
        if not self.has_supported_extension(filename):
            return False
        return (
            isinstance(doc, list)
            and len(doc) > 0
            and isinstance(doc[0], dict)
            and all(k in doc[0] for k in ("RuleID", "Description", "File"))
        )

    def build(self, doc: Any, file_path: str, filename: str) -> list[ResultNode]:
        if not isinstance(doc, list):
            raise MalformedDocument("Invalid GitLeaks data format")

        findings = [f for f in doc if isinstance(f, dict)]
        if not findings:
            return [
                ResultNode(
                    label="No security issues found",
                    severity=SeverityHint.PASSED,
                    detail="GitLeaks scan completed successfully with no findings",
                )
            ]

        out = [
            ResultNode(
                label=f"{len(findings)} potential secrets found",
                severity=SeverityHint.WARNING,
                detail=f"GitLeaks detected {len(findings)} potential security issues",
            )
        ]

        for path, file_findings in group_by(findings, lambda f: f.get("File")).items():
            out.append(
                ResultNode(
                    label=basename(path),
                    detail=f"{path} ({len(file_findings)} findings)",
                    tooltip=path,
                    children=[self._finding(f, path) for f in file_findings],
                )
            )
        return out

    def _finding(self, f: dict, path: str) -> ResultNode:
        rule = str(f.get("RuleID") or "unknown-rule")
        secret = str(f.get("Secret") or "")
        line = as_int(f.get("StartLine"))

        tooltip = [
            f"Rule: {rule}",
            f"Description: {f.get('Description') or ''}",
            f"Line: {line if line is not None else '?'}",
            f"Secret: {secret}",
            f"File: {path}",
        ]
        if f.get("Commit"):
            tooltip.append(f"Commit: {f['Commit']}")
        if f.get("Author"):
            tooltip.append(f"Author: {f['Author']}")

        navigation = None
        if f.get("File"):
            navigation = NavigationTarget(path=path, line=line, column=as_int(f.get("StartColumn")))

        return ResultNode(
            label=rule,
            severity=SeverityHint.WARNING,
            detail=f"Line {line if line is not None else '?'}: {truncate(secret, SECRET_DISPLAY_LENGTH)}",
            tooltip="\n".join(tooltip),
            navigation=navigation,
            finding=True,
        )
