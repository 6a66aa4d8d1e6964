from __future__ import annotations

from typing import Any

from resultlens.domain.models import NavigationTarget, ResultNode, SeverityHint
from .base import FormatParser, MalformedDocument
from .util import as_dict, as_int, as_list, basename, count_severities, group_by, severity_of, truncate

SEVERITIES = {
    "ERROR": SeverityHint.ERROR,
    "WARNING": SeverityHint.WARNING,
    "INFO": SeverityHint.INFO,
}


class SemgrepParser(FormatParser):
    id = "semgrep"
    name = "Semgrep"

    def can_handle(self, filename: str, doc: Any) -> bool:
        if not self.has_supported_extension(filename):
            return False
        return (
            isinstance(doc, dict)
            and "version" in doc
            and isinstance(doc.get("results"), list)
            and "paths" in doc
        )

    def build(self, doc: Any, file_path: str, filename: str) -> list[ResultNode]:
        if not isinstance(doc, dict) or not isinstance(doc.get("results"), list):
            raise MalformedDocument("Semgrep report has no results array")

        results = [r for r in doc["results"] if isinstance(r, dict)]
        scanned = as_list(as_dict(doc.get("paths")).get("scanned"))

        out = [
            ResultNode(
                label=f"Semgrep Scan v{doc.get('version')}",
                severity=SeverityHint.INFO,
                detail=f"Scanned {len(scanned)} files",
            )
        ]

        counts = count_severities((as_dict(r.get("extra")).get("severity") for r in results), SEVERITIES)
        for sev, n in counts.items():
            if n > 0:
                out.append(ResultNode(label=f"{sev}: {n} issues", severity=SEVERITIES[sev]))

        for path, file_results in group_by(results, lambda r: r.get("path")).items():
            out.append(
                ResultNode(
                    label=basename(path),
                    detail=f"{path} ({len(file_results)} findings)",
                    tooltip=path,
                    children=[self._finding(r, path) for r in file_results],
                )
            )

        errors = as_list(doc.get("errors"))
        if errors:
            out.append(
                ResultNode(
                    label=f"Errors ({len(errors)})",
                    severity=SeverityHint.WARNING,
                    children=[self._error(e) for e in errors],
                )
            )
        return out

    def _finding(self, r: dict, path: str) -> ResultNode:
        check_id = str(r.get("check_id") or "unknown-rule")
        rule = check_id.split(".")[-1] or check_id
        extra = as_dict(r.get("extra"))
        sev = str(extra.get("severity") or "UNKNOWN")
        message = str(extra.get("message") or "")
        start = as_dict(r.get("start"))
        end = as_dict(r.get("end"))
        line = as_int(start.get("line"))
        shortlink = as_dict(extra.get("metadata")).get("shortlink")

        tooltip = [
            f"Rule: {check_id}",
            f"Severity: {sev}",
            f"Lines: {start.get('line', '?')} - {end.get('line', '?')}",
            f"Message: {message}",
        ]
        if extra.get("fix"):
            tooltip.append(f"Fix: {extra['fix']}")
        if shortlink:
            tooltip.append(f"More info: {shortlink}")

        return ResultNode(
            label=f"[{sev}] {rule}",
            severity=severity_of(sev, SEVERITIES),
            detail=f"Line {line if line is not None else '?'}: {truncate(message, self.label_max_length)}",
            tooltip="\n".join(tooltip),
            navigation=NavigationTarget(path=path, line=line, column=as_int(start.get("col"))),
            finding=True,
        )

    def _error(self, e: Any) -> ResultNode:
        if isinstance(e, dict):
            message = str(e.get("message") or e.get("type") or "Unknown error")
        else:
            message = str(e)
        return ResultNode(
            label=truncate(message, self.label_max_length) or "Unknown error",
            severity=SeverityHint.WARNING,
            tooltip=message,
        )
