"""Watch mode - re-run parts of the build when input files change.

A watchdog observer runs on background threads and reports raw filesystem
events to :class:`DebouncedEventHandler`, which coalesces bursts of events
per path and hands one :class:`ChangeEvent` per burst to a
:class:`ChangeQueue`. The main thread blocks on that queue and processes
events one at a time, so builds never overlap.

Known limitations: removals and renames are logged but not mirrored into
the output directory.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .builder import SlideshowBuilder
from .errors import (
    BuildError,
    ChannelClosedError,
    CopyStaticError,
    RenderError,
    SlidedeckError,
    WatchError,
)

logger = logging.getLogger(__name__)

# Seconds between observer health checks while the queue is idle
HEALTH_CHECK_INTERVAL = 1.0


class ChangeKind(Enum):
    """Kinds of coalesced filesystem notifications."""
    CREATE = 'create'
    WRITE = 'write'
    CHMOD = 'chmod'
    REMOVE = 'remove'
    RENAME = 'rename'
    RESCAN = 'rescan'
    ERROR = 'error'


@dataclass
class ChangeEvent:
    """One coalesced filesystem notification.

    Attributes:
        kind: What happened.
        path: Affected path (source path for renames), if any.
        dest_path: Destination path for renames.
        error: Underlying fault for ERROR events.
    """
    kind: ChangeKind
    path: Optional[Path] = None
    dest_path: Optional[Path] = None
    error: Optional[BaseException] = None


# watchdog event types → change kinds; others (opened, closed_no_write) are ignored
_WATCHDOG_KINDS: Dict[str, ChangeKind] = {
    'created': ChangeKind.CREATE,
    'modified': ChangeKind.WRITE,
    'closed': ChangeKind.WRITE,
    'deleted': ChangeKind.REMOVE,
    'moved': ChangeKind.RENAME,
}


def change_from_watchdog(event: FileSystemEvent) -> Optional[ChangeEvent]:
    """Convert a raw watchdog event, or return None for uninteresting ones."""
    kind = _WATCHDOG_KINDS.get(event.event_type)
    if kind is None:
        return None
    dest = getattr(event, 'dest_path', '')
    return ChangeEvent(
        kind=kind,
        path=Path(os.fsdecode(event.src_path)),
        dest_path=Path(os.fsdecode(dest)) if dest else None,
    )


def coalesce(previous: Optional[ChangeEvent], current: ChangeEvent) -> ChangeEvent:
    """Merge two notifications for the same path into one.

    A creation absorbs later writes and attribute changes; otherwise the
    latest notification wins.
    """
    if previous is None:
        return current
    if previous.kind is ChangeKind.CREATE and current.kind in (ChangeKind.WRITE, ChangeKind.CHMOD):
        return previous
    return current


class ChangeQueue:
    """Thread-safe channel of change events with close detection."""

    _CLOSED = object()

    def __init__(self):
        self._queue: queue.Queue = queue.Queue()

    def put(self, event: ChangeEvent) -> None:
        self._queue.put(event)

    def close(self) -> None:
        self._queue.put(self._CLOSED)

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Block for the next event.

        Returns:
            The next event, or None if ``timeout`` elapsed first.

        Raises:
            ChannelClosedError: Once the queue has been closed.
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is self._CLOSED:
            # Leave the marker for any later reader
            self._queue.put(self._CLOSED)
            raise ChannelClosedError()
        return item


class DebouncedEventHandler(FileSystemEventHandler):
    """Coalesces watchdog events per path before queueing them.

    An event is delivered once ``debounce_ms`` passes without further
    activity on the same path.
    """

    def __init__(self, changes: ChangeQueue, debounce_ms: int = 250):
        super().__init__()
        self.changes = changes
        self.delay = max(debounce_ms, 0) / 1000.0
        self._lock = threading.Lock()
        self._pending: Dict[Optional[Path], ChangeEvent] = {}
        self._timers: Dict[Optional[Path], Tuple[int, threading.Timer]] = {}
        self._generation = 0

    def on_any_event(self, event: FileSystemEvent) -> None:
        change = change_from_watchdog(event)
        if change is not None:
            self.submit(change)

    def submit(self, change: ChangeEvent) -> None:
        """Add a notification, restarting the quiet period for its path.

        Renaming a file created within the window is reported as a creation
        of the destination, which is how editors that save through a
        temporary file show up.
        """
        with self._lock:
            pending = self._pending.get(change.path)
            if (change.kind is ChangeKind.RENAME and change.dest_path is not None
                    and pending is not None and pending.kind is ChangeKind.CREATE):
                self._drop(change.path)
                change = ChangeEvent(ChangeKind.CREATE, change.dest_path)
            key = change.path
            self._pending[key] = coalesce(self._pending.get(key), change)
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous[1].cancel()
            self._generation += 1
            timer = threading.Timer(self.delay, self._flush, args=(key, self._generation))
            timer.daemon = True
            self._timers[key] = (self._generation, timer)
            timer.start()

    def _drop(self, key: Optional[Path]) -> None:
        # Caller holds the lock
        self._pending.pop(key, None)
        entry = self._timers.pop(key, None)
        if entry is not None:
            entry[1].cancel()

    def _flush(self, key: Optional[Path], generation: int) -> None:
        with self._lock:
            current = self._timers.get(key)
            if current is None or current[0] != generation:
                return
            del self._timers[key]
            change = self._pending.pop(key, None)
        if change is not None:
            self.changes.put(change)

    def cancel(self) -> None:
        """Drop all pending notifications."""
        with self._lock:
            for _, timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._pending.clear()


def _is_under(path: Path, directory: Path) -> bool:
    return path == directory or directory in path.parents


def handle_event(builder: SlideshowBuilder, event: ChangeEvent) -> None:
    """Process one change notification synchronously.

    Raises:
        WatchError: For ERROR notifications.
        SlidedeckError: If the triggered copy or render fails.
    """
    kind, path = event.kind, event.path

    if kind in (ChangeKind.CREATE, ChangeKind.WRITE, ChangeKind.CHMOD):
        if path is not None and _is_under(path, builder.static_dir):
            builder.copy_single_static(path)
        elif kind is ChangeKind.CHMOD or path in (builder.input_path, builder.template_path):
            builder.write_output()
        else:
            logger.debug(f"Ignoring change to unrelated path: {path}")
    elif kind is ChangeKind.REMOVE:
        logger.warning(f"Remove (unimplemented): {path}")
    elif kind is ChangeKind.RENAME:
        logger.warning(f"Rename (unimplemented): {path} -> {event.dest_path}")
    elif kind is ChangeKind.RESCAN:
        logger.info("Rescanning watched files")
    elif kind is ChangeKind.ERROR:
        if path is not None:
            logger.error(f"Filesystem watcher error at {path}")
        raise WatchError(event.error or RuntimeError("unknown watcher error"), path)


def run_event_loop(
    builder: SlideshowBuilder,
    changes: ChangeQueue,
    is_alive: Optional[Callable[[], bool]] = None,
    poll_interval: float = HEALTH_CHECK_INTERVAL,
) -> None:
    """Process change events until a fatal one arrives.

    Copy, build and render failures are logged and the loop continues.

    Args:
        builder: Builder used for re-rendering and copying.
        changes: Source of coalesced change events.
        is_alive: Optional health check for the producer; polled while idle.
        poll_interval: Seconds to wait for an event before polling health.

    Raises:
        WatchError: On a watcher fault or if the producer died.
        ChannelClosedError: If the queue was closed.
    """
    while True:
        event = changes.get(timeout=poll_interval)
        if event is None:
            if is_alive is not None and not is_alive():
                raise WatchError(RuntimeError("filesystem observer stopped unexpectedly"))
            continue

        logger.info(f"Filesystem event: {event.kind.value} {event.path or ''}")
        try:
            handle_event(builder, event)
        except (CopyStaticError, BuildError, RenderError) as e:
            logger.error(f"Rebuild failed: {e}")


def watch_targets(builder: SlideshowBuilder) -> List[Tuple[Path, bool]]:
    """Directories to observe as (path, recursive) pairs."""
    targets = [(builder.static_dir, True)]
    for path in (builder.input_path, builder.template_path):
        parent = path.parent
        if _is_under(parent, builder.static_dir) or (parent, False) in targets:
            continue
        targets.append((parent, False))
    return targets


def _observer_alive(observer) -> bool:
    return observer.is_alive() and all(emitter.is_alive() for emitter in observer.emitters)


def watch(
    builder: SlideshowBuilder,
    debounce_ms: int = 250,
    observer_factory: Callable[[], Observer] = Observer,
) -> None:
    """Build once, then rebuild on changes until a fatal error.

    Raises:
        WatchError: If the watcher cannot start or reports a fault.
        ChannelClosedError: If the event channel closes.
    """
    try:
        builder.build()
    except SlidedeckError as e:
        logger.error(f"Initial build failed: {e}")

    changes = ChangeQueue()
    handler = DebouncedEventHandler(changes, debounce_ms)
    observer = observer_factory()
    for path, recursive in watch_targets(builder):
        try:
            observer.schedule(handler, str(path), recursive=recursive)
        except OSError as e:
            raise WatchError(e, path) from e
    try:
        observer.start()
    except OSError as e:
        raise WatchError(e) from e

    logger.info("Initialized filesystem watcher")
    try:
        run_event_loop(builder, changes, is_alive=lambda: _observer_alive(observer))
    finally:
        handler.cancel()
        observer.stop()
        observer.join()
