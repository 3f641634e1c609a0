"""Reporting response schemas; the report service builds them directly."""

from agency.services.reports import CityCount, ClaimStateStats, LabelValue, SeriesPoint, Snapshot

__all__ = ["CityCount", "ClaimStateStats", "LabelValue", "SeriesPoint", "Snapshot"]
