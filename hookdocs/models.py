"""Core data models shared across hookdocs components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

HOOK_KINDS: Tuple[str, ...] = ("action", "filter")


@dataclass(frozen=True)
class Category:
    """Sidebar category a product can be nested under."""

    id: str
    label: str
    position: int = 0
    parent: Optional[str] = None


@dataclass(frozen=True)
class Product:
    """One configured unit of documentation backed by a single repository."""

    id: str
    repo: str
    label: str
    branch: Optional[str] = None
    category: Optional[str] = None
    src_dir: Optional[str] = None
    source_dir: Optional[Path] = None
    ignore_files: Tuple[str, ...] = ()
    ignore_hooks: Tuple[str, ...] = ()

    @property
    def repo_name(self) -> str:
        """Directory name of the checkout (`owner/name` -> `name`)."""
        return self.repo.rstrip("/").split("/")[-1]


class SyncAction:
    CLONED = "cloned"
    UPDATED = "updated"
    CLONE_FAILED = "clone_failed"
    UPDATE_FAILED = "update_failed"


@dataclass
class SyncOutcome:
    """Result of cloning or updating a single product repository."""

    product_id: str
    repo: str
    action: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.action in (SyncAction.CLONED, SyncAction.UPDATED)


class GenerationAction:
    GENERATED = "generated"
    DRY_RUN = "dry_run"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """Result of regenerating the hook docs of one product."""

    product_id: str
    ok: bool
    action: str
    reason: str = ""
    input_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    fatal: bool = False


@dataclass(frozen=True)
class HookParameter:
    name: str
    type: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type, "description": self.description}


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "line": self.line}


@dataclass
class HookRecord:
    """Normalized view of one documented hook.

    ``name`` is the registered hook string and the public API surface;
    ``id`` only identifies the markdown page.
    """

    id: str
    name: str
    kind: str
    product: str
    description: str
    parameters: List[HookParameter] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    example: Optional[str] = None
    since: Optional[str] = None
    source: Optional[SourceLocation] = None
    url: str = ""
    related: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "product": self.product,
            "description": self.description,
            "parameters": [param.to_dict() for param in self.parameters],
            "categories": list(self.categories),
            "example": self.example,
            "since": self.since,
            "source": self.source.to_dict() if self.source else None,
            "url": self.url,
            "related": list(self.related),
        }

    def to_compact(self) -> Dict[str, str]:
        return {
            "n": self.name,
            "t": self.kind[0],
            "p": self.product,
            "d": self.description,
            "u": self.url,
        }


__all__ = [
    "Category",
    "GenerationAction",
    "GenerationResult",
    "HOOK_KINDS",
    "HookParameter",
    "HookRecord",
    "Product",
    "SourceLocation",
    "SyncAction",
    "SyncOutcome",
]
