"""FlattenService — plan and execute the flattening of a LaTeX project.

Pipeline: VALIDATE → PLAN → RESOLVE COLLISIONS → PROCESS → REPORT

Planning walks the project in sorted order, computes every flat name,
and resolves collisions through a :class:`FlatNameRegistry`. Processing
then reads, rewrites and writes each file independently, sequentially
or on a thread pool; the result is the same either way because the
plan already fixed which source owns each output name.
"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from texflat.domain.collisions import Collision, CollisionPolicy, FlatNameRegistry
from texflat.domain.paths import PathEncodingError, flatten_path
from texflat.domain.references import count_references, rewrite_document
from texflat.infrastructure.filesystem import (
    LocationError,
    check_input_dir,
    check_output_dir,
    copy_bytes,
    find_project_files,
    is_document_source,
    prepare_output_dir,
    read_document,
    write_document,
)
from texflat.services.base import BaseService
from texflat.services.result import ServiceResult
from texflat.services.telemetry import get_current_span, trace_span, traced

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FileTask:
    """One planned input file and its flat destination name."""

    source: Path
    relative: str  # posix path relative to the project root
    target_name: str
    document: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.relative,
            "target": self.target_name,
            "document": self.document,
        }


@dataclass(frozen=True)
class FileOutcome:
    """What processing a single task produced."""

    task: FileTask
    reference_count: int = 0


@dataclass(frozen=True)
class FlattenPlan:
    """Ordered tasks with unique target names plus every collision seen."""

    input_root: Path
    tasks: list[FileTask]
    collisions: list[Collision]


class FileProcessingError(Exception):
    """A single file could not be read, rewritten, or written."""

    def __init__(self, task: FileTask, code: str, message: str) -> None:
        self.task = task
        self.code = code
        super().__init__(message)


class FlattenService(BaseService):
    """Flatten a nested LaTeX project into a single directory."""

    # ── Public operations ─────────────────────────────────────────────

    @traced
    def plan(self, input_dir: Path, output_dir: Path | None = None) -> ServiceResult:
        """Compute the flattening plan without writing anything."""
        op = "plan_flatten"
        try:
            input_root = check_input_dir(input_dir)
            output_root = check_output_dir(output_dir) if output_dir is not None else None
            flat_plan = self._build_plan(input_root, exclude=output_root)
        except LocationError as exc:
            return ServiceResult.failure(op, exc.code, str(exc))
        except PathEncodingError as exc:
            return ServiceResult.failure(
                op, "PATH_ENCODING", str(exc), detail={"segment": repr(exc.segment)}
            )

        span = get_current_span()
        if span:
            span.annotate("files", len(flat_plan.tasks))

        warnings = [_describe_collision(c, flat_plan.input_root) for c in flat_plan.collisions]
        data: dict[str, Any] = {
            "input": str(input_root),
            "file_count": len(flat_plan.tasks),
            "document_count": sum(1 for t in flat_plan.tasks if t.document),
            "collision_count": len(flat_plan.collisions),
            "files": [t.to_dict() for t in flat_plan.tasks],
            "collisions": [_collision_dict(c, input_root) for c in flat_plan.collisions],
        }
        if output_root is not None:
            data["output"] = str(output_root)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def flatten(self, input_dir: Path, output_dir: Path) -> ServiceResult:
        """Flatten *input_dir* into the empty (or absent) *output_dir*."""
        op = "flatten"
        warnings: list[str] = []
        policy = self._config.on_collision

        try:
            input_root = check_input_dir(input_dir)
            output_root = check_output_dir(output_dir)
            with trace_span("plan") as span:
                flat_plan = self._build_plan(input_root, exclude=output_root)
                if span:
                    span.annotate("files", len(flat_plan.tasks))
                    span.annotate("collisions", len(flat_plan.collisions))
        except LocationError as exc:
            return ServiceResult.failure(op, exc.code, str(exc))
        except PathEncodingError as exc:
            return ServiceResult.failure(
                op, "PATH_ENCODING", str(exc), detail={"segment": repr(exc.segment)}
            )

        if flat_plan.collisions:
            collisions = [_collision_dict(c, input_root) for c in flat_plan.collisions]
            if policy is CollisionPolicy.ERROR:
                first = flat_plan.collisions[0]
                return ServiceResult.failure(
                    op,
                    "NAME_COLLISION",
                    f"{len(collisions)} flat name collision(s), first: "
                    + _describe_collision(first, input_root),
                    detail={"collisions": collisions},
                )
            for collision in flat_plan.collisions:
                if policy is CollisionPolicy.WARN:
                    log.warning(
                        "flatten.collision",
                        flat_name=collision.flat_name,
                        previous=str(collision.previous),
                        current=str(collision.current),
                    )
                    warnings.append(_describe_collision(collision, input_root))
                else:
                    log.debug("flatten.overwrite", flat_name=collision.flat_name)

        try:
            output_root = prepare_output_dir(output_dir)
        except LocationError as exc:
            return ServiceResult.failure(op, exc.code, str(exc))

        try:
            with trace_span("process") as span:
                outcomes = self._execute(flat_plan.tasks, output_root)
                if span:
                    span.annotate("jobs", self._config.jobs)
        except FileProcessingError as exc:
            return ServiceResult.failure(
                op,
                exc.code,
                str(exc),
                detail={"source": exc.task.relative, "target": exc.task.target_name},
                warnings=warnings,
            )

        documents = [o for o in outcomes if o.task.document]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "input": str(input_root),
                "output": str(output_root),
                "file_count": len(outcomes),
                "document_count": len(documents),
                "copied_count": len(outcomes) - len(documents),
                "reference_count": sum(o.reference_count for o in documents),
                "collision_count": len(flat_plan.collisions),
                "files": [o.task.to_dict() for o in outcomes],
            },
            warnings=warnings,
        )

    @traced
    def rewrite_file(self, path: Path) -> ServiceResult:
        """Rewrite the references of a single document without writing it."""
        op = "rewrite"
        try:
            text = read_document(path)
        except UnicodeDecodeError as exc:
            return ServiceResult.failure(
                op, "CONTENT_ENCODING", f"{path} is not valid UTF-8: {exc.reason}"
            )
        except OSError as exc:
            return ServiceResult.failure(op, "IO_ERROR", f"Failed to read {path}: {exc}")

        extra = self._config.extra_commands
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(path),
                "reference_count": count_references(text, extra_commands=extra),
                "content": rewrite_document(
                    text, delimiter=self._config.delimiter, extra_commands=extra
                ),
            },
        )

    # ── Planning ──────────────────────────────────────────────────────

    def _build_plan(self, input_root: Path, *, exclude: Path | None = None) -> FlattenPlan:
        """Walk the project and map every file to its flat name.

        Raises PathEncodingError on the first undecodable path segment.
        """
        registry = FlatNameRegistry()
        tasks: dict[str, FileTask] = {}
        extensions = self._config.document_extensions

        for source in find_project_files(input_root, exclude=exclude):
            target_name = flatten_path(input_root, source, delimiter=self._config.delimiter)
            task = FileTask(
                source=source,
                relative=source.relative_to(input_root).as_posix(),
                target_name=target_name,
                document=is_document_source(source, extensions),
            )
            registry.claim(target_name, source)
            # The latest claim owns the name, as in a sequential overwrite.
            tasks.pop(target_name, None)
            tasks[target_name] = task
            log.debug("flatten.planned", source=task.relative, target=target_name)

        return FlattenPlan(
            input_root=input_root,
            tasks=list(tasks.values()),
            collisions=list(registry.collisions),
        )

    # ── Processing ────────────────────────────────────────────────────

    def _execute(self, tasks: list[FileTask], output_root: Path) -> list[FileOutcome]:
        jobs = self._config.jobs
        if jobs <= 1 or len(tasks) <= 1:
            return [self._process(task, output_root) for task in tasks]

        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures: list[Future[FileOutcome]] = [
                executor.submit(self._process, task, output_root) for task in tasks
            ]
            done, _pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in done:
                exc = future.exception()
                if exc is not None:
                    executor.shutdown(wait=True, cancel_futures=True)
                    raise exc
            return [future.result() for future in futures]

    def _process(self, task: FileTask, output_root: Path) -> FileOutcome:
        target = output_root / task.target_name
        try:
            if not task.document:
                copy_bytes(task.source, target)
                log.debug("flatten.copied", source=task.relative, target=task.target_name)
                return FileOutcome(task=task)

            text = read_document(task.source)
            extra = self._config.extra_commands
            write_document(
                target,
                rewrite_document(text, delimiter=self._config.delimiter, extra_commands=extra),
            )
            references = count_references(text, extra_commands=extra)
            log.debug(
                "flatten.rewritten",
                source=task.relative,
                target=task.target_name,
                references=references,
            )
            return FileOutcome(task=task, reference_count=references)
        except UnicodeDecodeError as exc:
            msg = f"{task.relative} is not valid UTF-8: {exc.reason}"
            raise FileProcessingError(task, "CONTENT_ENCODING", msg) from exc
        except OSError as exc:
            msg = f"Failed to write {task.relative} as {task.target_name}: {exc}"
            raise FileProcessingError(task, "IO_ERROR", msg) from exc


def _collision_dict(collision: Collision, root: Path) -> dict[str, str]:
    return {
        "flat_name": collision.flat_name,
        "previous": collision.previous.relative_to(root).as_posix(),
        "current": collision.current.relative_to(root).as_posix(),
    }


def _describe_collision(collision: Collision, root: Path) -> str:
    c = _collision_dict(collision, root)
    return (
        f"{c['previous']} and {c['current']} both flatten to {c['flat_name']};"
        f" keeping {c['current']}"
    )
