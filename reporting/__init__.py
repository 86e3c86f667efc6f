"""Text reports for a finished experiment."""

from .report import ObservationPrinter, format_event_matrix, format_observation, format_summary

__all__ = ["ObservationPrinter", "format_event_matrix", "format_observation", "format_summary"]
