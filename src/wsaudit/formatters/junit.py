"""JUnit XML formatter for CI/CD integration.

Each control area becomes a test suite and each check a test case; failing
checks are reported as failures typed by severity.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from xml.dom import minidom
from xml.etree import ElementTree as ET

from ..models.report import Report, ReportFinding

UNCLASSIFIED_SUITE = "Unclassified"


def group_report_findings(report: Report) -> dict[str, list[ReportFinding]]:
    """Report findings grouped by control area label.

    Checks that belong to no area are collected under "Unclassified".
    """
    groups: dict[str, list[ReportFinding]] = {}
    for area in report.findings_by_control_area.values():
        groups[area.control_family] = list(area.findings)
    if report.unclassified_findings:
        groups[UNCLASSIFIED_SUITE] = list(report.unclassified_findings)
    return groups


def export_junit_results(
    report: Report,
    output_path: Path,
    suite_name: str = "Workspace Compliance Audit",
) -> dict:
    """Export a report as JUnit XML.

    Args:
        report: The synthesized report.
        output_path: Path to write the XML file.
        suite_name: Name for the testsuites element.

    Returns:
        Dict with: path, total_tests, failures, passed.
    """
    testsuites = ET.Element("testsuites")
    testsuites.set("name", suite_name)
    testsuites.set("timestamp", datetime.now().strftime("%Y-%m-%dT%H:%M:%S"))

    total_tests = 0
    total_failures = 0

    for area_name, findings in group_report_findings(report).items():
        if not findings:
            continue

        testsuite = ET.SubElement(testsuites, "testsuite")
        testsuite.set("name", area_name)
        testsuite.set("tests", str(len(findings)))

        suite_failures = 0

        for finding in findings:
            total_tests += 1

            testcase = ET.SubElement(testsuite, "testcase")
            testcase.set("name", finding.check)
            testcase.set("classname", area_name)

            if finding.status == "FAIL":
                total_failures += 1
                suite_failures += 1
                severity = finding.severity or "MEDIUM"

                failure = ET.SubElement(testcase, "failure")
                failure.set("message", f"[{severity}] {finding.check}")
                failure.set("type", severity.lower())

                text_parts = [f"Severity: {severity}"]
                if finding.compliance_mappings:
                    controls = ", ".join(
                        f"{fw} {code}" for fw, code in finding.compliance_mappings.items()
                    )
                    text_parts.append(f"Controls: {controls}")
                text_parts.append(f"\nRemediation:\n{finding.recommendation}")

                failure.text = "\n".join(text_parts)

        testsuite.set("failures", str(suite_failures))
        testsuite.set("errors", "0")
        testsuite.set("skipped", "0")

    testsuites.set("tests", str(total_tests))
    testsuites.set("failures", str(total_failures))
    testsuites.set("errors", "0")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Pretty-print XML
    rough = ET.tostring(testsuites, encoding="unicode")
    dom = minidom.parseString(rough)
    xml_str = dom.toprettyxml(indent="  ", encoding="UTF-8")
    output_path.write_bytes(xml_str)

    return {
        "path": str(output_path),
        "total_tests": total_tests,
        "failures": total_failures,
        "passed": total_tests - total_failures,
    }
