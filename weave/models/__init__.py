"""Domain models for Weave.

Configuration records, strand records and run results.
"""

from .config_models import (
    AnalyticsConfig,
    AndroidEscapes,
    Casing,
    ConstantsConfig,
    Language,
    Platform,
    Source,
    StringsConfig,
    WeaveConfig,
)
from .run_result import RunResult, TaskResult
from .strand import ConstantStrand, ContentStrand, HeaderStrand, LanguageStrand, Strand, is_content
from .warning_record import WarningRecord

__all__ = [
    # Configuration models
    "AnalyticsConfig",
    "AndroidEscapes",
    "Casing",
    "ConstantsConfig",
    "Language",
    "Platform",
    "Source",
    "StringsConfig",
    "WeaveConfig",
    # Strands
    "ConstantStrand",
    "ContentStrand",
    "HeaderStrand",
    "LanguageStrand",
    "Strand",
    "is_content",
    # Results
    "RunResult",
    "TaskResult",
    "WarningRecord",
]
