"""Sample file loading."""

from __future__ import annotations

from weighttrend.data.sample_loader import LoadReport, SampleLoader, load_samples_from_csv

__all__ = ["LoadReport", "SampleLoader", "load_samples_from_csv"]
