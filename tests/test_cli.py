import json

import pytest

from a11yscan.cli import build_parser, main

VIOLATIONS = {
    "violations": [
        {
            "id": "color-contrast",
            "impact": "serious",
            "tags": ["cat.color", "wcag2aa", "wcag143"],
            "help": "Elements must meet minimum color contrast ratio thresholds",
            "nodes": [{"html": "<p class=\"muted\">", "target": [".muted"]}],
        }
    ]
}


@pytest.fixture
def axe_file(tmp_path):
    path = tmp_path / "axe.json"
    path.write_text(json.dumps(VIOLATIONS), encoding="utf-8")
    return path


@pytest.fixture
def metrics_file(tmp_path):
    path = tmp_path / "metrics.json"
    path.write_text(json.dumps({"body_text": "", "focusable_elements": 3}), encoding="utf-8")
    return path


def test_parser_defaults():
    args = build_parser().parse_args(["https://example.com"])
    assert args.levels is None
    assert args.axe is None


def test_scores_stored_results(axe_file, capsys):
    assert main(["https://example.com", "--axe", str(axe_file), "--log-level", "warning"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["outcome"]["status"] == "completed"
    assert report["outcome"]["levels"] == ["A", "AA"]
    assert report["outcome"]["overall_score"] == 95
    assert report["outcome"]["compliance_level"] == "AA"
    (issue,) = report["issues"]
    assert issue["criterion"] == "WCAG 2.1 AA - 1.4.3 Contrast (Minimum)"
    assert issue["category"] == "Visual Accessibility"


def test_writes_report_file_with_metrics(axe_file, metrics_file, tmp_path):
    out = tmp_path / "report.json"
    code = main([
        "https://example.com", "-l", "AAA", "--axe", str(axe_file),
        "--metrics", str(metrics_file), "-o", str(out),
    ])
    assert code == 0
    outcome = json.loads(out.read_text(encoding="utf-8"))["outcome"]
    assert outcome["navigation_score"] == 40
    assert outcome["reading_score"] is None


def test_unreadable_metrics_exit_with_error(axe_file, tmp_path, capsys):
    bad = tmp_path / "metrics.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["https://example.com", "-l", "AODA", "--axe", str(axe_file), "--metrics", str(bad)]) == 1
    assert capsys.readouterr().out == ""


def test_failed_scan_exit_code(tmp_path):
    assert main(["https://example.com", "--axe", str(tmp_path / "missing.json")]) == 1


def test_rejects_unknown_level():
    with pytest.raises(SystemExit) as excinfo:
        main(["https://example.com", "-l", "AAAA"])
    assert excinfo.value.code == 2
