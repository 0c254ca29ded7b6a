"""Domain layer for auditsampler."""

from auditsampler.domain.sampling import SamplingService, perform_sampling
from auditsampler.domain.ledger_import import LedgerImportService
from auditsampler.domain.sample_export import SampleExportService

__all__ = [
    "SamplingService",
    "perform_sampling",
    "LedgerImportService",
    "SampleExportService",
]
