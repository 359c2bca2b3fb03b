"""Batch build of a directory of component documents."""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from astrogen.compiler.codegen.generator import CodeGenerator
from astrogen.compiler.config import CompileOptions
from astrogen.compiler.exceptions import AstrogenError
from astrogen.compiler.loader import ComponentLoader

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


@dataclass
class BuildSummary:
    components: int
    hydrated: int
    failed: int
    out_dir: Path
    errors: List[str] = field(default_factory=list)


class ComponentBuilder:
    def __init__(
        self,
        src_dir: Path,
        out_dir: Path,
        options: Union[None, CompileOptions, Mapping[str, Any]] = None,
    ) -> None:
        self.src_dir = src_dir.resolve()
        self.out_dir = out_dir.resolve()
        self.codegen = CodeGenerator(options)
        self.entries: Dict[str, dict] = {}
        self.errors: List[str] = []
        self._component_count = 0
        self._hydrated_count = 0

    def build(self) -> BuildSummary:
        self.out_dir.mkdir(parents=True, exist_ok=True)

        for source in self._discover():
            self._compile_file(source)

        manifest = {
            "version": 1,
            "src_dir": str(self.src_dir),
            "entries": self.entries,
        }
        manifest_path = self.out_dir / MANIFEST_NAME
        manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")

        return BuildSummary(
            components=self._component_count,
            hydrated=self._hydrated_count,
            failed=len(self.errors),
            out_dir=self.out_dir,
            errors=list(self.errors),
        )

    def _discover(self) -> List[Path]:
        sources = []
        for path in sorted(self.src_dir.rglob("*.json")):
            rel = path.relative_to(self.src_dir)
            if any(part.startswith(("_", ".")) for part in rel.parts):
                continue
            # The output directory may live inside the source tree
            if path.resolve().is_relative_to(self.out_dir):
                continue
            sources.append(path)
        return sources

    def _compile_file(self, source: Path) -> None:
        try:
            component = ComponentLoader().load_file(source)
            result = self.codegen.generate(component)
        except AstrogenError as e:
            logger.error("Failed to compile %s: %s", source, e)
            self.errors.append(str(e))
            return

        artifact_rel = self._artifact_path_for(source)
        artifact_path = self.out_dir / artifact_rel
        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        artifact_path.write_text(result.code, encoding="utf-8")
        logger.debug("Wrote %s", artifact_path)

        self.entries[str(source.relative_to(self.src_dir))] = {
            "artifact": str(artifact_rel),
            "hash": self._hash_file(source),
            "component": component.name,
            **result.metadata,
        }
        self._component_count += 1
        if result.analysis.needs_hydration:
            self._hydrated_count += 1

    def _artifact_path_for(self, source: Path) -> Path:
        rel = source.relative_to(self.src_dir)
        stem = rel.stem
        if stem.endswith(".lite"):
            stem = stem[: -len(".lite")]
        return rel.with_name(f"{stem}.astro")

    def _hash_file(self, path: Path) -> str:
        return hashlib.sha256(path.read_bytes()).hexdigest()


def build_components(
    src_dir: Union[str, Path],
    out_dir: Optional[Union[str, Path]] = None,
    options: Union[None, CompileOptions, Mapping[str, Any]] = None,
) -> BuildSummary:
    """Compile every `*.json` component document below `src_dir`.

    A document that fails to load or compile is logged and counted; the rest
    of the build carries on.
    """
    src_path = Path(src_dir)
    if out_dir is None:
        out_dir = src_path / "dist"
    builder = ComponentBuilder(src_path, Path(out_dir), options)
    return builder.build()
