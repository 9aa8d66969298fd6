"""
Storage layer for exporting audit results.

Provides abstract interface for storage backends and file-based implementations
for CSV and JSON export.
"""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

from .models import AuditOutcome, BatchResult


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class Storage(ABC):
    """
    Abstract interface for storage backends.

    Designed to be swappable - a database backend can replace file export
    without changing engine code.
    """

    @abstractmethod
    def save(self, result: BatchResult, format: str = "csv", output_path: str | None = None) -> str:
        """
        Save batch results to storage.

        Args:
            result: BatchResult to save
            format: Output format ('csv' or 'json')
            output_path: Optional output file path. If not provided, generates one.

        Returns:
            Path to the saved file (for file storage) or identifier (for database)

        Raises:
            StorageError: If save operation fails
        """
        pass


class FileStorage(Storage):
    """
    File-based storage implementation.

    Exports results to CSV (one row per audited link) or JSON (one report per URL).
    """

    FORMATS = ("csv", "json")

    CSV_FIELDS = ["Page URL", "Link", "Status", "Broken", "Error"]

    def __init__(self, output_directory: str = "."):
        """
        Initialize file storage.

        Args:
            output_directory: Directory to save output files (default: current directory)
        """
        self.output_directory = Path(output_directory)
        self.output_directory.mkdir(parents=True, exist_ok=True)

    def save(self, result: BatchResult, format: str = "csv", output_path: str | None = None) -> str:
        format_lower = format.lower()

        if format_lower not in self.FORMATS:
            raise StorageError(f"Unsupported format: {format}. Use 'csv' or 'json'.")

        if output_path is None:
            timestamp = result.started_at.strftime("%Y%m%d_%H%M%S")
            output_path = f"internal_links_{timestamp}.{format_lower}"

        output_file_path = self.output_directory / output_path

        try:
            if format_lower == "csv":
                self._save_csv(result, output_file_path)
            else:
                self._save_json(result, output_file_path)
        except OSError as e:
            raise StorageError(f"Failed to save results: {e}") from e

        return str(output_file_path)

    def _save_csv(self, result: BatchResult, output_path: Path):
        """
        Save results to CSV format.

        One row per internal link with its status; a failed audit gets a single
        row carrying its error.

        Args:
            result: BatchResult to save
            output_path: Path to save CSV file
        """
        with open(output_path, "w", newline="", encoding="utf-8") as csvfile:
            csvfile.write("# Internal Link Report\n")
            csvfile.write(f"# Generated: {result.finished_at}\n")
            csvfile.write(f"# URLs Processed: {result.urls_processed}\n")
            csvfile.write(f"# URLs Failed: {result.urls_failed}\n")
            csvfile.write("\n")

            writer = csv.DictWriter(csvfile, fieldnames=self.CSV_FIELDS)
            writer.writeheader()

            for outcome in result.outcomes:
                writer.writerows(self._csv_rows(outcome))

    def _csv_rows(self, outcome: AuditOutcome) -> list[dict]:
        if outcome.report is None:
            error = outcome.error.message if outcome.error else ""
            return [{"Page URL": outcome.url, "Link": "", "Status": "", "Broken": "", "Error": error}]

        broken = {link.url for link in outcome.report.broken_links}
        return [
            {
                "Page URL": outcome.url,
                "Link": link,
                "Status": "" if status is None else status,
                "Broken": "Yes" if link in broken else "No",
                "Error": "",
            }
            for link, status in outcome.report.link_statuses()
        ]

    def _save_json(self, result: BatchResult, output_path: Path):
        """
        Save results to JSON format.

        Each entry is the report as the API returns it, or ``{url, error}``.

        Args:
            result: BatchResult to save
            output_path: Path to save JSON file
        """
        data = {
            "metadata": {
                "started_at": result.started_at.isoformat(),
                "finished_at": result.finished_at.isoformat() if result.finished_at else None,
                "urls_processed": result.urls_processed,
                "urls_succeeded": result.urls_succeeded,
                "urls_failed": result.urls_failed,
                "success_rate": result.success_rate,
            },
            "results": [outcome.to_dict() for outcome in result.outcomes],
        }

        with open(output_path, "w", encoding="utf-8") as jsonfile:
            json.dump(data, jsonfile, indent=2, ensure_ascii=False)
