import logging
import os
import subprocess
import sys
from pathlib import Path
from shutil import which

from desktop_ui import settings_store
from desktop_ui.ui_config import DEFAULT_LOCAL_TARGET, LOCAL_APP_CANDIDATES, LOCAL_APP_EXECUTABLES, platform_key
from workspace.errors import CollaboratorFailure, LocalPathNotConfigured, ValidationError

log = logging.getLogger(__name__)

APP_PATHS_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\App Paths"


def _spawn(args):
    subprocess.Popen(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)


def open_link(url):
    if sys.platform == "win32":
        args = ["cmd", "/C", "start", "", url]
    elif sys.platform == "darwin":
        args = ["open", url]
    else:
        args = ["xdg-open", url]
    try:
        _spawn(args)
    except OSError as exc:
        raise CollaboratorFailure(f"无法打开浏览器: {exc}") from exc


def normalize_path(path):
    return (path or "").strip().strip('"').strip()


def get_configured_local_path(target=DEFAULT_LOCAL_TARGET):
    return settings_store.load_local_path(target)


def set_configured_local_path(path, target=DEFAULT_LOCAL_TARGET):
    normalized = normalize_path(path)
    if not normalized:
        raise ValidationError("请输入有效的路径")
    try:
        settings_store.save_local_path(target, normalized)
    except OSError as exc:
        raise CollaboratorFailure(f"保存失败: {exc}") from exc
    return normalized


def launch_local(target=DEFAULT_LOCAL_TARGET):
    exe_path = get_configured_local_path(target)
    if exe_path is None and Path(normalize_path(target)).is_file():
        exe_path = normalize_path(target)
    if not exe_path:
        raise LocalPathNotConfigured(target, f"请先配置 {target} 路径")
    try:
        _spawn([exe_path])
    except OSError as exc:
        raise CollaboratorFailure(f"无法启动 {target}: {exc}。请检查路径是否正确。") from exc


def _read_app_paths_registry(exe_name):
    import winreg

    for hive in (winreg.HKEY_LOCAL_MACHINE, winreg.HKEY_CURRENT_USER):
        try:
            with winreg.OpenKey(hive, rf"{APP_PATHS_KEY}\{exe_name}") as key:
                try:
                    value, _ = winreg.QueryValueEx(key, "")
                    if value:
                        return value
                except OSError:
                    pass
                try:
                    folder, _ = winreg.QueryValueEx(key, "Path")
                except OSError:
                    continue
                candidate = str(Path(folder.rstrip("\\")) / exe_name)
                if Path(candidate).exists():
                    return candidate
        except OSError:
            continue
    return None


def _expand_candidate(raw):
    try:
        return raw.format(**os.environ)
    except (KeyError, IndexError):
        return None


def auto_detect_local_path(target=DEFAULT_LOCAL_TARGET):
    platform = platform_key()
    exe_name = LOCAL_APP_EXECUTABLES.get(target, {}).get(platform)

    if platform == "win32" and exe_name:
        found = _read_app_paths_registry(exe_name)
        if found and Path(found).exists():
            return found

    for raw in LOCAL_APP_CANDIDATES.get(target, {}).get(platform, ()):
        candidate = _expand_candidate(raw)
        if candidate and Path(candidate).exists():
            return candidate

    if exe_name:
        found = which(exe_name)
        if found:
            return found
    log.debug("No local install found for %s", target)
    return None
