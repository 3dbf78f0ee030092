"""Load weight samples from CSV files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from weighttrend.tracking.models import InvalidSampleError, Sample, SampleFileError

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    """Outcome of loading a sample file."""

    samples: list[Sample] = field(default_factory=list)
    skipped_missing: int = 0
    skipped_invalid: int = 0

    @property
    def loaded(self) -> int:
        return len(self.samples)


class SampleLoader:
    """Reads weight samples from CSV.

    CSV format:
        timestamp,weight
        1704067200,180.4
        1704153600,180.1

    A ``date`` column (ISO 8601, interpreted as UTC) may be used instead of
    ``timestamp``. Extra columns are ignored.
    """

    REQUIRED_COLUMNS = ["weight"]
    TIME_COLUMNS = ["timestamp", "date"]

    def load_from_csv(self, csv_path: Path) -> LoadReport:
        """Load samples from a CSV file.

        Args:
            csv_path: Path to the CSV file

        Returns:
            LoadReport with the parsed samples and skip counts

        Raises:
            SampleFileError: If the file is missing or required columns are absent
        """
        if not csv_path.exists():
            raise SampleFileError(f"Sample file not found: {csv_path}", path=str(csv_path))

        try:
            df = pd.read_csv(csv_path)
        except pd.errors.EmptyDataError:
            return LoadReport()
        except pd.errors.ParserError as e:
            raise SampleFileError(f"Could not parse {csv_path}: {e}", path=str(csv_path)) from e

        df.columns = [str(c).strip().lower() for c in df.columns]

        missing = [c for c in self.REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise SampleFileError(f"Missing required columns: {missing}", path=str(csv_path))

        if "timestamp" in df.columns:
            times = pd.to_numeric(df["timestamp"], errors="coerce")
        elif "date" in df.columns:
            parsed = pd.to_datetime(df["date"], errors="coerce", utc=True)
            times = (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(seconds=1)
        else:
            raise SampleFileError(
                f"Missing time column: expected one of {self.TIME_COLUMNS}",
                path=str(csv_path),
            )

        weights = pd.to_numeric(df["weight"], errors="coerce")

        report = LoadReport()
        for ts, weight in zip(times, weights):
            if pd.isna(ts) or pd.isna(weight):
                report.skipped_missing += 1
                continue
            try:
                report.samples.append(Sample(timestamp=int(ts), weight=float(weight)))
            except InvalidSampleError:
                report.skipped_invalid += 1

        logger.debug(
            "Loaded %d samples from %s (%d missing, %d invalid)",
            report.loaded,
            csv_path,
            report.skipped_missing,
            report.skipped_invalid,
        )
        return report


def load_samples_from_csv(csv_path: Path) -> list[Sample]:
    """Convenience wrapper returning just the samples."""
    return SampleLoader().load_from_csv(csv_path).samples
