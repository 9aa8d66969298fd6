"""
Terminal output formatter for CLI.

Handles all display logic - no business logic, just presentation.
"""

from linkaudit.models import AuditReport, BatchResult

# Maximum number of entries shown per list
MAX_SHOWN = 10


def print_results_summary(result: BatchResult) -> None:
    """
    Print a human-readable summary of results to terminal.

    Shows overall statistics and detailed information for pages with issues.

    Args:
        result: BatchResult containing all outcomes
    """
    print("\n" + "=" * 80)
    print("INTERNAL LINK REPORT")
    print("=" * 80)
    print(f"\nURLs Processed: {result.urls_processed}")
    print(f"URLs Succeeded: {result.urls_succeeded}")
    print(f"URLs Failed:    {result.urls_failed}")
    print(f"Success Rate:   {result.success_rate}%")

    if result.finished_at:
        duration = (result.finished_at - result.started_at).total_seconds()
        print(f"Duration:       {duration:.1f} seconds")

    reports_with_issues = result.get_reports_with_issues()

    print(f"\n{'=' * 80}")
    print(f"Pages With Issues: {len(reports_with_issues)} / {result.urls_processed} URLs")
    print(f"{'=' * 80}\n")

    if not reports_with_issues:
        print("✓ No internal link issues detected.\n")
    else:
        for i, report in enumerate(reports_with_issues, 1):
            print(f"[{i}] {report.url}")
            _print_report(report)
            print("\n" + "-" * 80 + "\n")

    failed_outcomes = result.get_failed_outcomes()
    if failed_outcomes:
        print(f"\n{'=' * 80}")
        print(f"FAILED URLS ({len(failed_outcomes)})")
        print(f"{'=' * 80}\n")

        for i, outcome in enumerate(failed_outcomes, 1):
            print(f"[{i}] {outcome.url}")
            if outcome.error:
                print(f"    • {outcome.error.message}")
            print("-" * 80 + "\n")


def _print_report(report: AuditReport) -> None:
    """
    Print link counts, broken links, issues and recommendations.

    Args:
        report: AuditReport to display
    """
    print(f"    Internal Links: {report.total_links} ({report.unique_links} unique)")
    print(f"    Broken Links:   {len(report.broken_links)}")

    if report.broken_links:
        print("\n    Broken:")
        for broken in report.broken_links[:MAX_SHOWN]:
            status = broken.status or "Error"
            print(f"      • {broken.url} ({status})")
        if len(report.broken_links) > MAX_SHOWN:
            print(f"      ... and {len(report.broken_links) - MAX_SHOWN} more links")

    print("\n    Issues:")
    for issue, recommendation in zip(report.issues, report.recommendations):
        print(f"      • {issue}")
        print(f"        → {recommendation}")
