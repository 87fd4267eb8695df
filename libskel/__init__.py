"""
Animation metadata recovery for binary skeleton (.skel) files.
"""

from .config import ExtractionPolicy, SKEL_EXTENSION
from .decoder import EmptyAnimationTable, decode_generic, decode_versioned
from .discovery import InvalidDirectoryError, find_skel_files
from .model import AnimationRecord, BatchStats, ExtractionOutcome, StrategyAttempt, StrategyKind
from .names import is_valid_animation_name
from .orchestrator import DEFAULT_CASCADE, CascadeStep, ExtractionOrchestrator, file_identifier
from .predefined import KNOWLEDGE_BASE, KnowledgeBaseEntry, predefined_records
from .reader import (
    BufferUnderrun,
    ImplausibleCount,
    NameDecodeFailure,
    SkelCursor,
    SkelDecodeError,
    UnrecoverablePosition,
)
from .report import Reporter
from .scanners import scan_raw_strings, scan_text
from .writer import render_lua, write_lua

__all__ = [
    "ExtractionPolicy",
    "SKEL_EXTENSION",
    "EmptyAnimationTable",
    "decode_generic",
    "decode_versioned",
    "InvalidDirectoryError",
    "find_skel_files",
    "AnimationRecord",
    "BatchStats",
    "ExtractionOutcome",
    "StrategyAttempt",
    "StrategyKind",
    "is_valid_animation_name",
    "DEFAULT_CASCADE",
    "CascadeStep",
    "ExtractionOrchestrator",
    "file_identifier",
    "KNOWLEDGE_BASE",
    "KnowledgeBaseEntry",
    "predefined_records",
    "BufferUnderrun",
    "ImplausibleCount",
    "NameDecodeFailure",
    "SkelCursor",
    "SkelDecodeError",
    "UnrecoverablePosition",
    "Reporter",
    "scan_raw_strings",
    "scan_text",
    "render_lua",
    "write_lua",
]
