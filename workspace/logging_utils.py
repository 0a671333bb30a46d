import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR_NAME = "alpha-workspace"
LOG_FILENAME = "workspace.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_logs_dir(dir_name: str = LOG_DIR_NAME) -> Path:
    """
    Pick a writable log directory.

    Order: WORKSPACE_LOG_DIR, XDG state home, XDG cache home, then the temp dir.
    """
    candidates = []
    env_override = os.environ.get("WORKSPACE_LOG_DIR")
    if env_override:
        candidates.append(Path(env_override).expanduser())
    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home / dir_name)
    candidates.append(cache_home / dir_name)

    for target in candidates:
        try:
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    fallback = Path(tempfile.gettempdir()) / dir_name
    fallback.mkdir(parents=True, exist_ok=True)
    return fallback


def resolve_log_level(configured: str = "INFO") -> int:
    name = os.environ.get("WORKSPACE_LOG_LEVEL", configured or "INFO").strip().upper()
    if name not in LOG_LEVELS:
        name = "INFO"
    return getattr(logging, name)


def build_rotating_file_handler(log_dir: Path, filename: str = LOG_FILENAME, *, retention: int = 5,
                                max_bytes: int = 512 * 1024) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=max(0, retention - 1),
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(level: str = "INFO", to_file: bool = True) -> logging.Logger:
    root = logging.getLogger("workspace")
    ui_root = logging.getLogger("desktop_ui")
    resolved = resolve_log_level(level)
    handlers = [logging.StreamHandler()]
    handlers[0].setFormatter(logging.Formatter(LOG_FORMAT))
    if to_file:
        try:
            handlers.append(build_rotating_file_handler(resolve_logs_dir()))
        except OSError as exc:
            root.warning("File logging disabled: %s", exc)
    for logger in (root, ui_root):
        for old in list(logger.handlers):
            logger.removeHandler(old)
        for handler in handlers:
            logger.addHandler(handler)
        logger.setLevel(resolved)
        logger.propagate = False
    return root
