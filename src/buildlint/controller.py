# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Own the single in-flight build process per editing context.

Every context has at most one :class:`RunningProcess`. Starting a new lint
kills the previous process for that context; when the killed process finally
reports back, its completion no longer matches the registered process and is
discarded as :class:`~buildlint.models.Superseded`. That identity check is
the only mechanism separating stale results from live ones.

Completion runs on a per-process watcher thread. Callbacks are invoked from
that thread while the controller lock is held, so a callback may safely start
another lint but must not block on work performed by other threads that need
the controller.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Future
from dataclasses import dataclass, field
from pathlib import Path
from subprocess import Popen
from types import TracebackType

from .classifier import classify
from .context import EditingContext
from .models import Issues, Outcome, ProcessExit, Superseded, ToolError
from .parsers import Grammar, require_grammar
from .positions import resolve_records
from .process import kill_process, spawn_merged

LOGGER = logging.getLogger(__name__)

CompletionCallback = Callable[[Outcome], None]


class CaptureBuffer:
    """Merged stdout/stderr text owned by exactly one running process."""

    __slots__ = ("_chunks",)

    def __init__(self) -> None:
        self._chunks: list[str] | None = []

    @property
    def released(self) -> bool:
        """Return ``True`` once the buffer contents have been dropped."""
        return self._chunks is None

    def append(self, chunk: str) -> None:
        """Add captured output to the buffer."""
        self._require_live().append(chunk)

    def text(self) -> str:
        """Return everything captured so far."""
        return "".join(self._require_live())

    def release(self) -> None:
        """Drop the captured output."""
        self._chunks = None

    def _require_live(self) -> list[str]:
        if self._chunks is None:
            raise RuntimeError("capture buffer has already been released")
        return self._chunks

    def __enter__(self) -> CaptureBuffer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()


@dataclass(slots=True, eq=False)
class LintRequest:
    """Handle for one lint invocation against a context."""

    context_id: str
    grammar: Grammar
    future: Future[Outcome] = field(default_factory=Future)
    process: RunningProcess | None = None

    def done(self) -> bool:
        """Return ``True`` when the request has an outcome."""
        return self.future.done()

    def result(self, timeout: float | None = None) -> Outcome:
        """Block until the outcome is available, including ``Superseded``."""
        return self.future.result(timeout)

    async def wait(self) -> Outcome:
        """Await the outcome from an asyncio event loop."""
        return await asyncio.wrap_future(self.future)


@dataclass(slots=True, eq=False)
class RunningProcess:
    """Build process associated with the most recent request of a context."""

    context: EditingContext
    request: LintRequest
    popen: Popen[str]
    callback: CompletionCallback | None = None
    buffer: CaptureBuffer = field(default_factory=CaptureBuffer)

    @property
    def pid(self) -> int:
        return self.popen.pid

    def terminate(self) -> None:
        """Kill the process; failures are logged rather than raised."""

        try:
            kill_process(self.popen)
        except OSError as exc:
            LOGGER.debug("could not terminate build pid=%s: %s", self.pid, exc)

    def exit_info(self) -> ProcessExit:
        return ProcessExit(pid=self.popen.pid, args=self.popen.args, returncode=self.popen.returncode)


def _deliver(callback: CompletionCallback | None, outcome: Outcome) -> None:
    if callback is not None:
        callback(outcome)


class LintController:
    """Spawn, supersede and collect build tool runs per editing context."""

    def __init__(self, *, env: Mapping[str, str] | None = None) -> None:
        self._env = dict(env) if env else None
        self._lock = threading.RLock()
        self._running: dict[str, RunningProcess] = {}

    def start_lint(
        self,
        context: EditingContext,
        command: Sequence[str],
        *,
        cwd: Path,
        callback: CompletionCallback | None = None,
        grammar: Grammar | None = None,
    ) -> LintRequest:
        """Start a build for ``context`` and return immediately.

        Any process still running for the context is killed first; its result
        will resolve as ``Superseded`` and never reach its callback. When the
        process cannot be started the request is already resolved to
        ``ToolError`` on return, and the callback receives it from a separate
        thread.

        Args:
            context: Document being linted.
            command: Resolved executable followed by its arguments.
            cwd: Project root the build runs in.
            callback: Receives the final outcome unless the run is superseded.
            grammar: Output grammar; detected from the file suffix when omitted.

        Returns:
            LintRequest: Handle whose future resolves to the run's outcome.

        Raises:
            UnsupportedFileError: When no grammar matches the context's file.
            ValueError: When ``command`` is empty.
        """

        selected = grammar or require_grammar(context.file_path)
        request = LintRequest(context_id=context.identity, grammar=selected)
        with self._lock:
            self._cancel_locked(context.identity)
            try:
                popen = spawn_merged(command, cwd=cwd, env=self._env)
            except OSError as exc:
                failure = ToolError(description=f"Failed to start build tool `{command[0]}`: {exc}")
                LOGGER.debug("spawn failed for %s: %s", context.identity, exc)
                request.future.set_result(failure)
                if callback is not None:
                    threading.Thread(
                        target=callback,
                        args=(failure,),
                        name="buildlint-spawn-failure",
                        daemon=True,
                    ).start()
                return request
            running = RunningProcess(context=context, request=request, popen=popen, callback=callback)
            request.process = running
            self._running[context.identity] = running
            LOGGER.debug("started build pid=%s for %s: %s", popen.pid, context.identity, list(popen.args))
            watcher = threading.Thread(
                target=self._watch,
                args=(running,),
                name=f"buildlint-watch-{popen.pid}",
                daemon=True,
            )
            watcher.start()
        return request

    def cancel(self, context: EditingContext) -> bool:
        """Kill the live process for ``context``; returns ``False`` when idle."""

        with self._lock:
            return self._cancel_locked(context.identity)

    def running(self, context: EditingContext) -> RunningProcess | None:
        """Return the live process registered for ``context``."""

        with self._lock:
            return self._running.get(context.identity)

    def shutdown(self) -> None:
        """Kill every live process; their outcomes resolve as ``Superseded``."""

        with self._lock:
            for identity in list(self._running):
                self._cancel_locked(identity)

    def _is_current_locked(self, running: RunningProcess) -> bool:
        return self._running.get(running.context.identity) is running

    def _cancel_locked(self, identity: str) -> bool:
        previous = self._running.pop(identity, None)
        if previous is None:
            return False
        LOGGER.debug("superseding build pid=%s for %s", previous.pid, identity)
        previous.terminate()
        return True

    def _watch(self, running: RunningProcess) -> None:
        try:
            output, _ = running.popen.communicate()
            running.buffer.append(output or "")
            self._complete(running)
        except Exception as exc:
            running.buffer.release()
            with self._lock:
                if self._is_current_locked(running):
                    del self._running[running.context.identity]
            if not running.request.future.done():
                running.request.future.set_exception(exc)
            raise

    def _complete(self, running: RunningProcess) -> None:
        """Classify a finished process and deliver its outcome exactly once."""

        context = running.context
        with running.buffer as captured, self._lock:
            current = self._is_current_locked(running)
            if current:
                del self._running[context.identity]
            outcome = classify(
                running.exit_info(),
                captured.text(),
                context=context,
                grammar=running.request.grammar,
                is_current=current,
            )
            if isinstance(outcome, Issues):
                outcome = outcome.model_copy(update={"diagnostics": tuple(resolve_records(context, outcome.records))})
            running.request.future.set_result(outcome)
            if isinstance(outcome, Superseded):
                LOGGER.debug("discarding superseded build pid=%s for %s", running.pid, context.identity)
                return
            _deliver(running.callback, outcome)


__all__ = ["CaptureBuffer", "CompletionCallback", "LintController", "LintRequest", "RunningProcess"]
