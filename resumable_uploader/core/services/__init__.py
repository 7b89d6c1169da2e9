"""
Core upload services: chunk planning, per-file orchestration and batches.
"""

from .planner import ChunkPlan, DEFAULT_CHUNK_SIZE, plan_chunks
from .orchestrator import UploadOrchestrator
from .batch import BatchRunner

__all__ = [
    "ChunkPlan",
    "DEFAULT_CHUNK_SIZE",
    "plan_chunks",
    "UploadOrchestrator",
    "BatchRunner",
]
