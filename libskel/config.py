from __future__ import annotations

import argparse
from dataclasses import dataclass

SKEL_EXTENSION = ".skel"


@dataclass(frozen=True)
class ExtractionPolicy:
    """Operator policy handed to the orchestrator at construction time.

    force_predefined: skip every inspection strategy and use the canned
        list for the file name.
    auto_predefined: fall back to the canned list when every inspection
        strategy comes back empty.
    debug: verbose diagnostics only; never changes results.
    """

    force_predefined: bool = False
    auto_predefined: bool = True
    debug: bool = False
    extension: str = SKEL_EXTENSION

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ExtractionPolicy":
        ext = getattr(args, "ext", None) or SKEL_EXTENSION
        if not ext.startswith("."):
            ext = "." + ext
        return cls(
            force_predefined=bool(getattr(args, "force_predefined", False)),
            auto_predefined=not getattr(args, "no_auto_predefined", False),
            debug=bool(getattr(args, "debug", False)),
            extension=ext.lower(),
        )
