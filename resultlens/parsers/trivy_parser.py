from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from resultlens.domain.models import NavigationTarget, ResultNode, SeverityHint
from .base import FormatParser, MalformedDocument
from .util import UNKNOWN_FILE, as_dict, as_int, as_list, basename, group_by, severity_of, truncate

logger = logging.getLogger(__name__)

SEVERITIES = {
    "CRITICAL": SeverityHint.ERROR,
    "HIGH": SeverityHint.WARNING,
    "MEDIUM": SeverityHint.INFO,
    "LOW": SeverityHint.PASSED,
}


class TrivyParser(FormatParser):
    id = "trivy"
    name = "Trivy"

    def can_handle(self, filename: str, doc: Any) -> bool:
        if not self.has_supported_extension(filename):
            return False
        if not isinstance(doc, dict) or "SchemaVersion" not in doc:
            return False
        results = doc.get("Results")
        return isinstance(results, list) and len(results) > 0 and isinstance(results[0], dict) and "Target" in results[0]

    def build(self, doc: Any, file_path: str, filename: str) -> list[ResultNode]:
        if not isinstance(doc, dict) or not isinstance(doc.get("Results"), list):
            raise MalformedDocument("Trivy report has no Results array")

        results = [r for r in doc["Results"] if isinstance(r, dict)]
        out = [
            ResultNode(
                label=f"Scan Info: {doc.get('ArtifactName') or filename}",
                severity=SeverityHint.INFO,
                detail=f"Created: {_format_created(doc.get('CreatedAt'))}",
            )
        ]

        counts = self._count_severities(results)
        logger.debug("Trivy severity counts: %s", counts, extra={"report": filename})
        for sev, n in counts.items():
            if n > 0:
                out.append(ResultNode(label=f"{sev}: {n} issues", severity=SEVERITIES[sev]))

        for type_name, type_results in group_by(results, lambda r: r.get("Type"), default="unknown").items():
            out.append(
                ResultNode(
                    label=f"{type_name} ({len(type_results)} findings)",
                    children=[self._target(r) for r in type_results],
                )
            )
        return out

    @staticmethod
    def _count_severities(results: list[dict]) -> dict[str, int]:
        counts = {k: 0 for k in SEVERITIES}
        for r in results:
            misconfigs = as_list(r.get("Misconfigurations"))
            for item in misconfigs + as_list(r.get("Vulnerabilities")):
                sev = str(as_dict(item).get("Severity") or "").upper()
                if sev in counts:
                    counts[sev] += 1

            # Summary-only results: failures count as HIGH
            failures = as_int(as_dict(r.get("MisconfSummary")).get("Failures")) or 0
            if not misconfigs and failures > 0:
                counts["HIGH"] += failures
        return counts

    def _target(self, r: dict) -> ResultNode:
        target = str(r.get("Target") or UNKNOWN_FILE)
        misconfigs = [m for m in as_list(r.get("Misconfigurations")) if isinstance(m, dict)]
        vulns = [v for v in as_list(r.get("Vulnerabilities")) if isinstance(v, dict)]
        issues = len(misconfigs) + len(vulns)

        location = f"{target} ({issues} issues)" if issues else target
        detail = location
        summary = r.get("MisconfSummary")
        failures = 0
        if isinstance(summary, dict):
            failures = as_int(summary.get("Failures")) or 0
            detail = f"✓ {summary.get('Successes', 0)} passed, ✗ {summary.get('Failures', 0)} failed"

        children = None
        severity = SeverityHint.WARNING if failures > 0 or vulns else None
        if issues:
            children = [self._misconfiguration(m, target) for m in misconfigs]
            children += [self._vulnerability(v, target) for v in vulns]
            if any(c.severity is SeverityHint.ERROR for c in children):
                severity = SeverityHint.ERROR

        return ResultNode(
            label=basename(target),
            severity=severity,
            detail=detail,
            tooltip=location,
            children=children,
        )

    def _misconfiguration(self, m: dict, target: str) -> ResultNode:
        sev = str(m.get("Severity") or "UNKNOWN")
        start_line = as_int(as_dict(m.get("CauseMetadata")).get("StartLine"))
        tooltip = (
            f"ID: {m.get('ID') or m.get('AVDID') or ''}\n"
            f"Severity: {sev}\n"
            f"Message: {m.get('Message') or ''}\n"
            f"Description: {m.get('Description') or ''}\n"
            f"Resolution: {m.get('Resolution') or ''}\n"
            f"More info: {m.get('PrimaryURL') or ''}"
        )
        return ResultNode(
            label=truncate(f"[{sev}] {m.get('Title') or m.get('ID') or 'Misconfiguration'}", self.label_max_length),
            severity=severity_of(sev, SEVERITIES),
            detail=truncate(m.get("Message") or "", self.label_max_length),
            tooltip=tooltip,
            # Trivy does not report columns; the editor starts at column 1
            navigation=NavigationTarget(path=target, line=start_line, column=1) if start_line else None,
            finding=True,
        )

    def _vulnerability(self, v: dict, target: str) -> ResultNode:
        sev = str(v.get("Severity") or "UNKNOWN")
        vuln_id = v.get("VulnerabilityID") or "unknown"
        pkg = f"{v.get('PkgName') or 'unknown'}@{v.get('InstalledVersion') or '?'}"
        fixed = v.get("FixedVersion")
        tooltip = (
            f"ID: {vuln_id}\n"
            f"Severity: {sev}\n"
            f"Package: {pkg}\n"
            f"Fixed version: {fixed or 'no fix available'}\n"
            f"Title: {v.get('Title') or ''}\n"
            f"Description: {v.get('Description') or ''}\n"
            f"More info: {v.get('PrimaryURL') or ''}"
        )
        return ResultNode(
            label=truncate(f"[{sev}] {vuln_id}: {pkg}", self.label_max_length),
            severity=severity_of(sev, SEVERITIES),
            detail=f"Fixed in {fixed}" if fixed else "No fix available",
            tooltip=tooltip,
            finding=True,
        )


def _format_created(value: Any) -> str:
    if not value:
        return "unknown"
    try:
        # Trivy emits RFC 3339 with nanoseconds; trim to microseconds
        text = str(value).replace("Z", "+00:00")
        head, dot, rest = text.partition(".")
        if dot:
            frac = rest[: len(rest) - len(rest.lstrip("0123456789"))]
            tz = rest[len(frac):]
            text = f"{head}.{frac[:6]}{tz}"
        return datetime.fromisoformat(text).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return str(value)
