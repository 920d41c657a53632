"""Entry and artifact models"""

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Entry:
    """One thing to build and publish"""

    source_path: Path
    output_name: str

    def __str__(self) -> str:
        return f"{self.source_path}:{self.output_name}"


@dataclass
class Artifact:
    """A byte payload ready to publish under ``key``

    ``body`` may be left empty when ``source_path`` is set; the publish
    pipeline reads the file right before upload.
    """

    key: str
    body: bytes = b""
    source_path: Optional[Path] = None
    content_type: Optional[str] = field(default=None)

    def __post_init__(self):
        if self.content_type is None:
            guessed, _ = mimetypes.guess_type(self.key)
            if self.key.endswith(".map"):
                guessed = "application/json"
            self.content_type = guessed or "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.body)


@dataclass
class Bundle:
    """Output of a single Bundler invocation"""

    code: bytes
    sourcemap: bytes
