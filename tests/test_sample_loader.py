"""Tests for CSV sample loading."""

from __future__ import annotations

import pytest

from weighttrend.data.sample_loader import SampleLoader, load_samples_from_csv
from weighttrend.tracking.models import Sample, SampleFileError

from conftest import BASE_TIMESTAMP, DAY


def write_csv(tmp_path, text: str):
    path = tmp_path / "weights.csv"
    path.write_text(text)
    return path


class TestSampleLoader:
    """Tests for SampleLoader."""

    def test_timestamp_column(self, sample_csv) -> None:
        report = SampleLoader().load_from_csv(sample_csv)

        assert report.loaded == 14
        assert report.samples[0] == Sample(BASE_TIMESTAMP, 185.0)
        assert report.samples[-1].timestamp == BASE_TIMESTAMP + 13 * DAY
        assert report.samples[-1].weight == pytest.approx(183.7)
        assert report.skipped_missing == 0
        assert report.skipped_invalid == 0

    def test_date_column_is_utc(self, tmp_path) -> None:
        path = write_csv(tmp_path, "date,weight\n2024-01-01,180.5\n2024-01-02,180.1\n")

        samples = load_samples_from_csv(path)

        assert samples == [
            Sample(BASE_TIMESTAMP, 180.5),
            Sample(BASE_TIMESTAMP + DAY, 180.1),
        ]

    def test_headers_are_normalized(self, tmp_path) -> None:
        path = write_csv(tmp_path, " Timestamp , Weight ,note\n100,180.0,morning\n")

        samples = load_samples_from_csv(path)

        assert samples == [Sample(100, 180.0)]

    def test_blank_rows_skipped(self, tmp_path) -> None:
        path = write_csv(tmp_path, "timestamp,weight\n100,180.0\n200,\n,181.0\n300,abc\n400,179.0\n")

        report = SampleLoader().load_from_csv(path)

        assert [s.timestamp for s in report.samples] == [100, 400]
        assert report.skipped_missing == 3

    def test_non_finite_weight_counted_as_invalid(self, tmp_path) -> None:
        path = write_csv(tmp_path, "timestamp,weight\n100,180.0\n200,inf\n")

        report = SampleLoader().load_from_csv(path)

        assert report.loaded == 1
        assert report.skipped_invalid == 1

    def test_empty_file(self, tmp_path) -> None:
        report = SampleLoader().load_from_csv(write_csv(tmp_path, ""))
        assert report.samples == []

    def test_header_only(self, tmp_path) -> None:
        report = SampleLoader().load_from_csv(write_csv(tmp_path, "timestamp,weight\n"))
        assert report.loaded == 0

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(SampleFileError) as exc_info:
            SampleLoader().load_from_csv(tmp_path / "missing.csv")
        assert exc_info.value.path.endswith("missing.csv")

    def test_missing_weight_column(self, tmp_path) -> None:
        path = write_csv(tmp_path, "timestamp,mass\n100,180.0\n")
        with pytest.raises(SampleFileError, match="weight"):
            SampleLoader().load_from_csv(path)

    def test_missing_time_column(self, tmp_path) -> None:
        path = write_csv(tmp_path, "day,weight\n1,180.0\n")
        with pytest.raises(SampleFileError, match="time column"):
            SampleLoader().load_from_csv(path)
