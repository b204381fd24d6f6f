# src/atlas_compute/core/traceability/manifest.py
"""
Run Manifest — proveniência de execuções de algoritmos e pipelines.

O Manifest consolida, de forma determinística e auditável:
    - run:    metadados da execução (run_id, started_at, engine_version,
              pipeline, finished_at/success quando encerrada)
    - inputs: identidade das entradas (config_hash, input_dataset, input_kind)
    - steps:  estado incremental por step_id ("<índice>.<algoritmo>")
    - events: log ordenado de eventos explícitos

Decisões arquiteturais:
    - UTC é o timezone canônico; timestamps naive são assumidos UTC
    - Persistência em JSON determinístico (`sort_keys=True`)
    - Toda mutação ocorre por funções explícitas; nada é inferido

Invariantes:
    - `events` preserva a ordem de chamada
    - `duration_ms` de um step é sempre >= 0

Limites explícitos:
    - Não executa algoritmos nem decide políticas de execução
    - Não migra versões de schema
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza `dt` para timezone-aware em UTC (naive é assumido UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> float:
    delta = _ensure_tzaware_utc(end) - _ensure_tzaware_utc(start)
    return max(0.0, delta.total_seconds() * 1000.0)


@dataclass
class RunManifest:
    """
    Registro de proveniência de uma execução.

    Serializável via `to_dict` / `from_dict` (round-trip sem perdas).
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    steps: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "steps": {k: dict(v) for k, v in self.steps.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RunManifest":
        return cls(
            run=dict(data.get("run") or {}),
            inputs=dict(data.get("inputs") or {}),
            steps={k: dict(v) for k, v in (data.get("steps") or {}).items()},
            events=[dict(e) for e in (data.get("events") or [])],
        )

    @property
    def failed_steps(self) -> List[str]:
        return [sid for sid, s in self.steps.items() if s.get("status") == "failed"]


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    engine_version: str,
    config_hash: Optional[str] = None,
    pipeline: Optional[str] = None,
    input_dataset: Optional[str] = None,
    input_kind: Optional[str] = None,
) -> RunManifest:
    """
    Cria o Manifest inicial de uma execução.

    Nenhum evento é emitido aqui: `steps` e `events` iniciam vazios e só
    mudam via `add_event`, `step_started`, `step_finished`, `step_failed`
    e `finish_run`.

    Args:
        run_id: Identificador único da execução.
        started_at: Início da execução (normalizado para UTC).
        engine_version: Versão do Atlas Compute (`atlas_compute.__version__`).
        config_hash: Hash da configuração efetiva, quando houver.
        pipeline: Nome do pipeline executado, quando houver.
        input_dataset: Nome do dataset de entrada.
        input_kind: `DatasetKind` do dataset de entrada (valor textual).

    Returns:
        RunManifest inicializado.
    """
    return RunManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "engine_version": engine_version,
            "pipeline": pipeline,
        },
        inputs={
            "config_hash": config_hash,
            "input_dataset": input_dataset,
            "input_kind": input_kind,
        },
    )


def add_event(
    manifest: RunManifest,
    *,
    event_type: str,
    ts: datetime,
    step_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Acrescenta um evento ao log do Manifest (ordem de chamada preservada)."""
    event: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if step_id is not None:
        event["step_id"] = step_id
    if payload is not None:
        event["payload"] = payload
    manifest.events.append(event)


def step_started(manifest: RunManifest, *, step_id: str, algorithm: str, ts: datetime) -> None:
    """Marca o step como `running` e registra `step_started`."""
    step = manifest.steps.setdefault(step_id, {"step_id": step_id})
    step.update({"algorithm": algorithm, "status": "running", "started_at": _iso(ts)})
    add_event(manifest, event_type="step_started", ts=ts, step_id=step_id, payload={"algorithm": algorithm})


def step_finished(
    manifest: RunManifest,
    *,
    step_id: str,
    ts: datetime,
    result: Mapping[str, Any],
) -> None:
    """
    Registra a conclusão bem-sucedida de um step.

    `result` segue o formato de `ExecutionResult.to_dict()`; quando o step
    não tem `started_at`, a duração informada em `result` é usada.

    Args:
        manifest: Manifest a atualizar.
        step_id: Identificador do step.
        ts: Timestamp de término.
        result: Resultado serializado (metrics, output_dataset, duration_ms).
    """
    step = manifest.steps.setdefault(step_id, {"step_id": step_id})
    started = step.get("started_at")
    if started:
        duration_ms = _ms_between(datetime.fromisoformat(started), ts)
    else:
        duration_ms = float(result.get("duration_ms") or 0.0)

    step.update(
        {
            "status": "success",
            "finished_at": _iso(ts),
            "duration_ms": duration_ms,
            "output_dataset": result.get("output_dataset"),
            "metrics": dict(result.get("metrics") or {}),
        }
    )
    add_event(
        manifest,
        event_type="step_finished",
        ts=ts,
        step_id=step_id,
        payload={"status": "success", "duration_ms": duration_ms},
    )


def step_failed(
    manifest: RunManifest,
    *,
    step_id: str,
    ts: datetime,
    error: str,
    error_kind: Optional[str] = None,
) -> None:
    """Marca o step como `failed` com a mensagem (e a categoria) do erro."""
    step = manifest.steps.setdefault(step_id, {"step_id": step_id})
    step.update(
        {
            "status": "failed",
            "finished_at": _iso(ts),
            "error": error,
            "error_kind": error_kind,
        }
    )
    add_event(
        manifest,
        event_type="step_failed",
        ts=ts,
        step_id=step_id,
        payload={"error": error, "error_kind": error_kind},
    )


def finish_run(manifest: RunManifest, *, ts: datetime, success: bool, failed_step_index: int = -1) -> None:
    """Fecha a execução em `run` (finished_at, success, failed_step_index)."""
    manifest.run.update(
        {
            "finished_at": _iso(ts),
            "success": success,
            "failed_step_index": failed_step_index,
        }
    )


def save_manifest(manifest: Union[RunManifest, Dict[str, Any]], path: Path) -> None:
    """
    Persiste o Manifest em JSON determinístico.

    Diretórios intermediários são criados. Conteúdo não serializável gera
    `TypeError` (nenhuma conversão implícita).
    """
    data = manifest.to_dict() if isinstance(manifest, RunManifest) else manifest
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")


def load_manifest(path: Path) -> RunManifest:
    """Restaura um Manifest salvo por `save_manifest`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return RunManifest.from_dict(data)
