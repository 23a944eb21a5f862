"""Inkrecon - Snapshot loading and document output (integration layer)"""

from inkrecon.pipeline.documents import (
    build_coverage_document,
    build_master_document,
    build_mismatch_report,
    write_document,
)
from inkrecon.pipeline.loaders import load_provider_file, load_providers

__all__ = [
    "build_coverage_document",
    "build_master_document",
    "build_mismatch_report",
    "load_provider_file",
    "load_providers",
    "write_document",
]
