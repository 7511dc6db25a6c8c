"""
Resize Result Model

Represents the outcome of resizing a single source image in a batch.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


@dataclass
class ResizeResult:
    """
    Result from resizing one source image.

    Contains the generated variants and indicates success/failure.
    """
    source: Path
    success: bool
    outputs: Dict[str, Path] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        """Check if resizing failed"""
        return not self.success

    @property
    def skipped_all(self) -> bool:
        """Check if every format was skipped (nothing generated)"""
        return self.success and not self.outputs
