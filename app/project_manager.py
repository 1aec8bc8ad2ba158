from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from app import log_buffer
from app.editing import EditorContext, ListCommand
from app.project_files import is_valid_project_filename
from compiler.diagnostics import Diagnostics
from export.bake import export_project
from models.io import ProjectFormatError, load_project, save_project
from models.project import PARTICLE_TEXTURES, EffectDescriptor, ProjectDocument
from runtime.scene import EffectRuntime
from runtime.spawner import SpawnReport, SpawnSession


class ProjectManager:
    """Owns the open ProjectDocument and its file; hosts subscribe for changes."""

    def __init__(self, runtime: Optional[EffectRuntime] = None, textures: Sequence[Any] = PARTICLE_TEXTURES):
        self.doc = ProjectDocument()
        self.path: Path | None = None
        self.dirty: bool = False
        self.context = EditorContext()
        self.session: SpawnSession | None = SpawnSession(runtime, textures) if runtime is not None else None
        self._listeners: List[Callable[["ProjectManager"], None]] = []

    def add_listener(self, fn: Callable[["ProjectManager"], None]) -> None:
        self._listeners.append(fn)

    def _notify(self):
        for fn in list(self._listeners):
            fn(self)

    def _changed(self):
        self.dirty = True
        self.refresh_context()
        self._notify()

    def display_path(self) -> str:
        return str(self.path) if self.path else "(not saved yet)"

    def refresh_context(self) -> None:
        self.context.visible_effects = self.doc.names()
        self.context.filename = self.path.name if self.path else None

    # ---- document lifecycle ----
    def new(self):
        self.doc = ProjectDocument()
        self.path = None
        self._changed()

    def load(self, path: Path):
        path = Path(path)
        try:
            doc = load_project(path)
        except ProjectFormatError as e:
            log_buffer.event("load", f"{path.name}: invalid project ({e})")
            raise
        self.doc = doc
        self.path = path
        self.dirty = False
        self.refresh_context()
        log_buffer.event("load", f"{path.name}: {len(doc.effects)} effect(s)")
        self._notify()

    def save(self, path: Path | None = None) -> Path:
        if path is not None:
            path = Path(path)
            if not is_valid_project_filename(path.name):
                raise ValueError(f"project file name must end with .omagari.json: {path.name}")
            self.path = path
        if self.path is None:
            raise ValueError("project has no file name yet")
        save_project(self.path, self.doc)
        self.dirty = False
        self.refresh_context()
        log_buffer.event("save", str(self.path))
        self._notify()
        return self.path

    def export(self) -> Path:
        if self.path is None:
            raise ValueError("save the project before exporting")
        out = export_project(self.path, self.doc)
        log_buffer.event("export", str(out))
        return out

    # ---- edits ----
    def add_effect(self, effect: EffectDescriptor | None = None) -> EffectDescriptor:
        effect = effect if effect is not None else EffectDescriptor()
        self.doc.effects.append(effect)
        self._changed()
        return effect

    def apply_to_effects(self, cmd: ListCommand) -> None:
        cmd.apply(self.doc.effects)
        self._changed()

    # ---- scene ----
    def spawn(self, diagnostics: Diagnostics | None = None) -> SpawnReport:
        if self.session is None:
            raise RuntimeError("no effect runtime attached")
        try:
            rep = self.session.spawn(self.doc, diagnostics)
        except IndexError as e:
            log_buffer.event("spawn", f"failed: {e}")
            raise
        log_buffer.event("spawn", f"{len(rep.entities)} effect(s), {len(rep.linked())} parent link(s)")
        return rep
