from __future__ import annotations

from typing import Any

from resultlens.domain.models import NavigationTarget, ResultNode, SeverityHint
from .base import FormatParser, MalformedDocument
from .util import UNKNOWN_FILE, as_dict, as_int, as_list, basename, group_by, severity_of, truncate

# Names the runner writes Checkov output to; used as a fast accept only
KNOWN_FILENAMES = ("checkov-results.json", "results_json.json", "checkov-report.json")

CHECK_MARKERS = ("check_id", "check_result", "bc_check_id")

SEVERITIES = {
    "CRITICAL": SeverityHint.ERROR,
    "HIGH": SeverityHint.WARNING,
    "MEDIUM": SeverityHint.WARNING,
    "LOW": SeverityHint.INFO,
}


def _is_report(obj: Any) -> bool:
    return isinstance(obj, dict) and "check_type" in obj and "results" in obj


def _is_check(obj: Any) -> bool:
    return isinstance(obj, dict) and any(k in obj for k in CHECK_MARKERS)


class CheckovParser(FormatParser):
    """Checkov emits one of three shapes depending on version and flags:

    * a report object ``{check_type, results, summary}``
    * a list of report objects, one per framework scanned
    * a bare list of check objects
    """

    id = "checkov"
    name = "Checkov"

    def can_handle(self, filename: str, doc: Any) -> bool:
        if not self.has_supported_extension(filename):
            return False

        if basename(filename) in KNOWN_FILENAMES and isinstance(doc, list) and doc:
            first = doc[0]
            if _is_report(first) or (isinstance(first, dict) and ("check_id" in first or "check_name" in first or "check_result" in first)):
                return True

        if isinstance(doc, dict):
            return all(k in doc for k in ("check_type", "results", "summary"))
        if isinstance(doc, list) and doc:
            return _is_check(doc[0]) or _is_report(doc[0])
        return False

    def build(self, doc: Any, file_path: str, filename: str) -> list[ResultNode]:
        if isinstance(doc, dict):
            return self._report(doc)

        if not isinstance(doc, list) or not doc:
            raise MalformedDocument("expected a Checkov report object or a non-empty list")

        if all(_is_report(d) for d in doc):
            out: list[ResultNode] = []
            for report in doc:
                out.extend(self._report(report))
            return out

        if not _is_check(doc[0]) and not (isinstance(doc[0], dict) and "check_name" in doc[0]):
            raise MalformedDocument("first entry is not a Checkov check")
        if not all(isinstance(c, dict) for c in doc):
            raise MalformedDocument("check list contains non-object entries")
        return self._check_list(doc, filename)

    # ── Shapes ────────────────────────────────────────────────────────
    def _report(self, data: dict) -> list[ResultNode]:
        results = data.get("results", {})
        if not isinstance(results, dict):
            raise MalformedDocument("'results' must be an object")

        out: list[ResultNode] = []
        summary = data.get("summary")
        if isinstance(summary, dict):
            out.append(
                ResultNode(
                    label=f"Scan Type: {data.get('check_type') or 'Unknown'}",
                    severity=SeverityHint.INFO,
                    detail=f"Resource Count: {summary.get('resource_count', 0)}",
                )
            )
            out.append(
                ResultNode(
                    label="Summary",
                    children=[
                        ResultNode(label=f"Passed: {summary.get('passed', 0)}", severity=SeverityHint.PASSED),
                        ResultNode(label=f"Failed: {summary.get('failed', 0)}", severity=SeverityHint.ERROR),
                        ResultNode(label=f"Skipped: {summary.get('skipped', 0)}", severity=SeverityHint.WARNING),
                        ResultNode(label=f"Parsing Errors: {summary.get('parsing_errors', 0)}", severity=SeverityHint.INFO),
                    ],
                )
            )

        for key, title, sev in (
            ("failed_checks", "Failed Checks", SeverityHint.ERROR),
            ("passed_checks", "Passed Checks", SeverityHint.PASSED),
            ("skipped_checks", "Skipped Checks", SeverityHint.WARNING),
        ):
            checks = [c for c in as_list(results.get(key)) if isinstance(c, dict)]
            if checks:
                out.append(self._section(title, sev, checks))

        parsing_errors = as_list(results.get("parsing_errors"))
        if parsing_errors:
            out.append(
                ResultNode(
                    label=f"Parsing Errors ({len(parsing_errors)})",
                    severity=SeverityHint.WARNING,
                    children=[ResultNode(label=str(e), tooltip=str(e)) for e in parsing_errors],
                )
            )

        if not out:
            out.append(ResultNode(label=f"Scan Type: {data.get('check_type') or 'Unknown'}", detail="No checks reported"))
        return out

    def _check_list(self, checks: list[dict], filename: str) -> list[ResultNode]:
        passed = [c for c in checks if as_dict(c.get("check_result")).get("result") == "PASSED"]
        failed = [c for c in checks if as_dict(c.get("check_result")).get("result") != "PASSED"]

        out = [
            ResultNode(
                label=f"Checkov Results: {filename}",
                severity=SeverityHint.INFO,
                detail=f"Total findings: {len(checks)}",
            ),
            ResultNode(
                label="Summary",
                children=[
                    ResultNode(label=f"Passed: {len(passed)}", severity=SeverityHint.PASSED),
                    ResultNode(label=f"Failed: {len(failed)}", severity=SeverityHint.ERROR),
                ],
            ),
        ]
        if failed:
            out.append(self._section("Failed Checks", SeverityHint.ERROR, failed))
        if passed:
            out.append(self._section("Passed Checks", SeverityHint.PASSED, passed))
        return out

    # ── Nodes ─────────────────────────────────────────────────────────
    def _section(self, title: str, severity: SeverityHint, checks: list[dict]) -> ResultNode:
        groups = group_by(checks, lambda c: c.get("file_path"))
        return ResultNode(
            label=f"{title} ({len(checks)})",
            severity=severity,
            children=[
                ResultNode(
                    label=f"{basename(path)} ({len(group)})",
                    detail=path,
                    tooltip=path,
                    children=[self._check(c) for c in group],
                )
                for path, group in groups.items()
            ],
        )

    def _check(self, check: dict) -> ResultNode:
        check_result = check.get("check_result")
        if isinstance(check_result, dict):
            status = str(check_result.get("result") or "UNKNOWN")
        elif check_result:
            status = str(check_result)
        else:
            status = "UNKNOWN"

        check_id = check.get("check_id") or check.get("bc_check_id") or ""
        check_name = check.get("check_name") or check.get("check_id") or "Unknown check"
        sev_label = f"[{check['severity']}] " if check.get("severity") else ""

        if status == "PASSED":
            severity = SeverityHint.PASSED
        else:
            severity = severity_of(check.get("severity"), SEVERITIES)

        return ResultNode(
            label=f"{sev_label}{check_id}: {check_name}",
            severity=severity,
            detail=f"Result: {status}",
            tooltip=f"{check_id}: {check_name}\nResult: {status}",
            children=self._check_details(check, check_result),
            finding=status not in ("PASSED", "SKIPPED"),
        )

    def _check_details(self, check: dict, check_result: Any) -> list[ResultNode]:
        details: list[ResultNode] = []

        if check.get("resource"):
            details.append(ResultNode(label=f"Resource: {check['resource']}"))

        if isinstance(check_result, dict):
            details.append(ResultNode(label=f"Result: {check_result.get('result') or 'Unknown'}"))
            keys = as_list(check_result.get("evaluated_keys"))
            if keys:
                details.append(ResultNode(label="Evaluated Keys:", children=[ResultNode(label=str(k)) for k in keys]))
        elif check_result:
            details.append(ResultNode(label=f"Result: {check_result}"))

        if check.get("description"):
            description = str(check["description"])
            details.append(
                ResultNode(
                    label=f"Description: {truncate(description, self.label_max_length)}",
                    tooltip=description,
                )
            )

        line_range = as_list(check.get("file_line_range"))
        if line_range:
            path = check.get("file_path") or UNKNOWN_FILE
            start = as_int(line_range[0])
            end = as_int(line_range[1]) if len(line_range) > 1 else start
            details.append(
                ResultNode(
                    label=f"File: {path}:{start}-{end}",
                    # Checkov has no column information; it reports column 0
                    navigation=NavigationTarget(path=check.get("file_abs_path") or path, line=start, column=0),
                )
            )

        if check.get("guideline"):
            details.append(ResultNode(label=f"Guideline: {check['guideline']}", tooltip=str(check["guideline"])))

        code = self._code_block(check)
        if code is not None:
            details.append(code)

        tags = check.get("entity_tags")
        if isinstance(tags, dict) and tags:
            details.append(ResultNode(label="Entity Tags", children=[ResultNode(label=f"{k}: {v}") for k, v in tags.items()]))

        return details

    @staticmethod
    def _code_block(check: dict) -> ResultNode | None:
        block = check.get("code_block")
        lines: list[ResultNode] = []

        if isinstance(block, list) and block:
            offset = as_int(check.get("_startline_")) or 0
            for index, entry in enumerate(block):
                if isinstance(entry, (list, tuple)) and len(entry) >= 2:
                    text = f"{entry[0]}: {str(entry[1]).rstrip()}"
                else:
                    text = f"{index + offset}: {str(entry).rstrip()}"
                lines.append(ResultNode(label=text))
        elif isinstance(block, dict) and block:
            for line_no, content in block.items():
                lines.append(ResultNode(label=f"{line_no}: {str(content).rstrip()}"))
        else:
            return None

        return ResultNode(label="Code Block", children=lines)
