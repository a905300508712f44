"""Exceptions raised by the assessment import pipeline."""

from __future__ import annotations


class ImportPipelineError(Exception):
    """Base class for import pipeline failures."""


class ConfigurationError(ImportPipelineError):
    """A required setting (e.g. the LLM API key) is missing."""


class ExtractionError(ImportPipelineError):
    """The language model did not produce usable assessment data."""


class FallbackExhausted(ExtractionError):
    """Extraction failed and the caller disabled the fallback path."""
