# src/atlas_compute/core/traceability/__init__.py
"""
Rastreabilidade do Atlas Compute: Event Log estruturado e Run Manifest.

API pública:
    - EventSink / EventLog → notificações de execução (algoritmos e pipelines)
    - RunManifest e funções explícitas de atualização/persistência
    - ManifestRecorder     → subscriber que grava notificações no Manifest

Nenhum evento é emitido implicitamente: sem sink no contexto, nada é
registrado.
"""

from .events import (
    ALGORITHM_COMPLETED,
    ALGORITHM_STARTED,
    PIPELINE_COMPLETED,
    EventLog,
    EventRecord,
    EventSink,
)
from .manifest import (
    RunManifest,
    add_event,
    create_manifest,
    finish_run,
    load_manifest,
    save_manifest,
    step_failed,
    step_finished,
    step_started,
)
from .recorder import ManifestRecorder

__all__ = [
    "ALGORITHM_COMPLETED",
    "ALGORITHM_STARTED",
    "PIPELINE_COMPLETED",
    "EventLog",
    "EventRecord",
    "EventSink",
    "ManifestRecorder",
    "RunManifest",
    "add_event",
    "create_manifest",
    "finish_run",
    "load_manifest",
    "save_manifest",
    "step_failed",
    "step_finished",
    "step_started",
]
