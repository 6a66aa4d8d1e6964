from resultlens.domain.models import SeverityHint
from resultlens.parsers.semgrep_parser import SemgrepParser


def test_can_handle_requires_version_results_and_paths(semgrep_report):
    p = SemgrepParser()
    assert p.can_handle("semgrep.json", semgrep_report)
    assert not p.can_handle("semgrep.json", {"version": "1", "results": []})
    assert not p.can_handle("semgrep.json", {"version": "1", "results": {}, "paths": {}})
    assert not p.can_handle("semgrep.xml", semgrep_report)


def test_header_and_severity_counts(semgrep_report):
    nodes = SemgrepParser().parse(semgrep_report, "p", "semgrep.json")

    assert nodes[0].label == "Semgrep Scan v1.50.0"
    assert nodes[0].detail == "Scanned 3 files"
    assert [n.label for n in nodes[1:4]] == ["ERROR: 1 issues", "WARNING: 1 issues", "INFO: 1 issues"]
    assert [n.severity for n in nodes[1:4]] == [SeverityHint.ERROR, SeverityHint.WARNING, SeverityHint.INFO]


def test_groups_by_path_in_first_seen_order(semgrep_report):
    groups = SemgrepParser().parse(semgrep_report, "p", "semgrep.json")[4:]

    assert [g.label for g in groups] == ["views.py", "main.py"]
    assert groups[0].detail == "/src/app/views.py (2 findings)"
    assert [c.label for c in groups[0].children] == ["[ERROR] eval-detected", "[INFO] open-never-closed"]


def test_finding_truncates_message_and_keeps_full_text_in_tooltip(semgrep_report):
    leaf = SemgrepParser().parse(semgrep_report, "p", "semgrep.json")[4].children[0]
    message = semgrep_report["results"][0]["extra"]["message"]

    shown = leaf.detail[len("Line 12: "):]
    assert len(shown) == 100
    assert shown.endswith("...")
    assert f"Message: {message}" in leaf.tooltip
    assert "Fix: ast.literal_eval(x)" in leaf.tooltip
    assert "More info: https://sg.run/abc" in leaf.tooltip
    assert leaf.navigation.path == "/src/app/views.py"
    assert (leaf.navigation.line, leaf.navigation.column) == (12, 5)


def test_unknown_severity_is_not_counted_and_maps_to_unknown(semgrep_report):
    semgrep_report["results"][1]["extra"]["severity"] = "CRITICAL"
    nodes = SemgrepParser().parse(semgrep_report, "p", "semgrep.json")

    assert "WARNING: 1 issues" not in [n.label for n in nodes]
    main_group = [n for n in nodes if n.label == "main.py"][0]
    assert main_group.children[0].severity is SeverityHint.UNKNOWN


def test_errors_are_listed(semgrep_report):
    semgrep_report["errors"] = [{"type": "SyntaxError", "message": "Could not parse app/bad.py"}]
    nodes = SemgrepParser().parse(semgrep_report, "p", "semgrep.json")

    assert nodes[-1].label == "Errors (1)"
    assert nodes[-1].children[0].label == "Could not parse app/bad.py"


def test_malformed_result_entry_does_not_raise():
    data = {"version": "1", "results": [{"check_id": None, "start": "nope", "extra": []}], "paths": None}
    nodes = SemgrepParser().parse(data, "p", "semgrep.json")

    assert nodes[0].detail == "Scanned 0 files"
    group = nodes[-1]
    assert group.label == "unknown-file"
    assert group.children[0].navigation.line is None
