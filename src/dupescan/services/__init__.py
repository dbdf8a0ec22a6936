from .fingerprint_service import Fingerprinter
from .partition_service import Partitioner, assign
from .aggregate_service import LocalAggregator
from .merge_service import MergeService
from .duplicate_service import DuplicateService
from .scan_service import ScanService, run_worker, scan_shard
from .resolve_service import ResolveService, ResolveSummary
from .report_service import ReportService


__all__ = [
    'Fingerprinter',
    'Partitioner',
    'assign',
    'LocalAggregator',
    'MergeService',
    'DuplicateService',
    'ScanService',
    'run_worker',
    'scan_shard',
    'ResolveService',
    'ResolveSummary',
    'ReportService',
]
