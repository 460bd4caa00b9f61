"""
Watch mode for WidgetSmith - generate tests when new component sources appear.

A new widget or page is usually written as several files. Events are
grouped per unit directory and the callback only runs once that unit has
been quiet for the debounce period, so generation sees the whole unit.
"""
import threading
import time
from datetime import datetime
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from widgetsmith.core.source_reader import EXTENSIONS
from widgetsmith.core.unit_detector import unit_root_for
from widgetsmith.support.config import WidgetSmithConfig


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with per-unit debouncing."""

    def __init__(self, callback, debounce_seconds: float = 0.5, extensions=tuple(EXTENSIONS), key_func=None):
        """
        Initialize handler.

        Args:
            callback: Function to call once a unit settles (receives the latest file path)
            debounce_seconds: Quiet time required after the last event for a unit
            extensions: File suffixes worth reacting to
            key_func: Maps a file path to the unit it belongs to (default: the file itself)
        """
        super().__init__()
        self.callback = callback
        self.debounce_seconds = debounce_seconds
        self.extensions = tuple(extensions)
        self.key_func = key_func or str
        self.pending: dict[str, tuple[Path, float]] = {}
        self._lock = threading.Lock()

    def on_created(self, event: FileSystemEvent):
        """Handle file creation events."""
        if event.is_directory:
            return

        if not str(event.src_path).endswith(self.extensions):
            return

        self._process_event(str(event.src_path))

    def on_moved(self, event: FileSystemEvent):
        """A file renamed into place counts as created."""
        if event.is_directory:
            return

        dest = str(getattr(event, "dest_path", ""))
        if dest.endswith(self.extensions):
            self._process_event(dest)

    def _process_event(self, file_path: str):
        """Record the event; every new event for a unit restarts its quiet period."""
        path = Path(file_path)
        key = self.key_func(path)
        with self._lock:
            self.pending[key] = (path, time.time())

    def flush(self, now: float | None = None) -> int:
        """
        Run the callback for every unit that has been quiet for at least
        debounce_seconds. Returns how many units were handed over.
        """
        now = time.time() if now is None else now
        with self._lock:
            settled = [key for key, (_, seen) in self.pending.items() if now - seen >= self.debounce_seconds]
            ready = [self.pending.pop(key)[0] for key in settled]

        for path in ready:
            self.callback(path)
        return len(ready)


def workspace_relative(file_path: Path, config: WidgetSmithConfig) -> str:
    """Repository-relative POSIX path of a file reported by the watcher."""
    root = Path(config.workspace_root) if config.workspace_root else Path.cwd()
    try:
        return file_path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return file_path.as_posix()


def unit_key(file_path: Path, config: WidgetSmithConfig) -> str:
    """Debounce key: the unit root for files inside a widget or page, else the file."""
    relative = workspace_relative(file_path, config)
    return unit_root_for(relative, config) or relative


def watched_roots(config: WidgetSmithConfig) -> list[Path]:
    """Sections and pages roots that exist on disk."""
    roots = [config.resolve(config.sections_root), config.resolve(config.pages_root)]
    return [root for root in roots if root.is_dir()]


def watch_workspace(config: WidgetSmithConfig, process_file_func):
    """
    Watch the sections and pages roots and run generation for new units.

    Args:
        config: WidgetSmith configuration
        process_file_func: Function to call with the latest file of each settled unit
    """
    def on_new_unit(file_path: Path):
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"[{timestamp}] Detected new files near {file_path} -> generating...")

        try:
            if process_file_func(file_path):
                print(f"[{timestamp}] ✓ Generation finished for {file_path.parent.name}")
            else:
                print(f"[{timestamp}] ✗ Generation reported failures for {file_path.parent.name}")
        except Exception as e:
            print(f"[{timestamp}] ✗ Error processing {file_path}: {e}")

    roots = watched_roots(config)
    if not roots:
        print("Nothing to watch: neither the sections root nor the pages root exists.")
        return

    handler = DebounceHandler(
        on_new_unit,
        debounce_seconds=config.watch_quiet_seconds,
        key_func=lambda path: unit_key(path, config),
    )
    observer = Observer()
    for root in roots:
        observer.schedule(handler, str(root), recursive=True)

    print(f"Watching {', '.join(str(r) for r in roots)} for new widgets and pages...")
    print("Press Ctrl+C to stop watching.")
    print()

    observer.start()

    try:
        while True:
            time.sleep(0.5)
            handler.flush()
    except KeyboardInterrupt:
        print("\n\nStopping watch mode...")
        observer.stop()

    observer.join()
    print("Watch mode stopped.")
