import logging
import os
import threading
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)

WATCHED_SUFFIXES = (".db", ".jsonl", ".db-wal")


class WatchHandler(FileSystemEventHandler):
    """Debounced trigger for changes to the beads database or JSONL export.

    Creations, modifications and moves onto a watched file all count; the
    refresh event is set 100ms after the last one.
    """

    debounce = 0.1

    def __init__(self, event: threading.Event) -> None:
        super().__init__()
        self.event = event
        self.timer: threading.Timer | None = None
        self.lock = threading.Lock()

    @staticmethod
    def is_beads_file(path: str | bytes) -> bool:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        return path.endswith(WATCHED_SUFFIXES)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self.is_beads_file(event.src_path):
            self._schedule_refresh()

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self.is_beads_file(event.src_path):
            self._schedule_refresh()

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self.is_beads_file(event.dest_path):
            self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        with self.lock:
            if self.timer is not None:
                self.timer.cancel()
            self.timer = threading.Timer(self.debounce, self.event.set)
            self.timer.daemon = True
            self.timer.start()

    def cleanup(self) -> None:
        """Cancel a pending refresh."""
        with self.lock:
            if self.timer is not None:
                self.timer.cancel()
                self.timer = None


def start_watching(
    watch_dir: Path, event: threading.Event
) -> tuple[BaseObserver, WatchHandler] | None:
    """Start observing `watch_dir`, or return None if it cannot be watched.

    Missing directories are expected (the dashboard may run outside a beads
    project); polling still refreshes the view in that case.
    """
    if not watch_dir.is_dir():
        logger.debug(f"Not watching {watch_dir}: no such directory")
        return None

    handler = WatchHandler(event)
    observer = Observer()
    try:
        observer.schedule(handler, str(watch_dir), recursive=False)
        observer.start()
    except Exception as e:
        logger.warning(f"File watching unavailable, using polling only: {e}")
        handler.cleanup()
        return None
    return observer, handler


def stop_watching(watching: tuple[BaseObserver, WatchHandler] | None) -> None:
    if watching is None:
        return
    observer, handler = watching
    handler.cleanup()
    observer.stop()
    observer.join(timeout=1)
