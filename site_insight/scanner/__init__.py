"""
Scanner module for running analysis tasks.

Contains the scan task lifecycle and the pipeline that merges task results
into an analysis record.
"""

from .tasks import TaskRecord, TaskStatus, TaskType, create_scan_tasks, scan_progress, scan_status
from .pipeline import AnalysisPipeline, ScanResult, derive_compliance_status

__all__ = [
    # Tasks
    "TaskRecord",
    "TaskStatus",
    "TaskType",
    "create_scan_tasks",
    "scan_progress",
    "scan_status",
    # Pipeline
    "AnalysisPipeline",
    "ScanResult",
    "derive_compliance_status",
]
