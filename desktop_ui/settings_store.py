import configparser
from pathlib import Path

from desktop_ui.ui_config import FONT_SCALE_ORDER, LOG_LEVEL_ORDER, THEME_ORDER

SETTINGS_PATH = Path(__file__).with_name("settings.ini")

DEFAULT_SETTINGS = {
    "theme_name": "Forest",
    "font_scale": "Normal",
    "log_level": "INFO",
    "reservoir_open": "0",
}


def _sanitize(settings):
    data = dict(DEFAULT_SETTINGS)
    data.update({k: str(v) for k, v in settings.items() if k in DEFAULT_SETTINGS})

    if data["theme_name"] not in THEME_ORDER:
        data["theme_name"] = DEFAULT_SETTINGS["theme_name"]
    if data["font_scale"] not in FONT_SCALE_ORDER:
        data["font_scale"] = DEFAULT_SETTINGS["font_scale"]
    level = data["log_level"].strip().upper()
    data["log_level"] = level if level in LOG_LEVEL_ORDER else DEFAULT_SETTINGS["log_level"]
    data["reservoir_open"] = "1" if data["reservoir_open"].strip() in ("1", "true", "True", "yes") else "0"
    return data


def _read_parser():
    parser = configparser.ConfigParser(interpolation=None)
    if SETTINGS_PATH.exists():
        try:
            parser.read(SETTINGS_PATH, encoding="utf-8")
        except configparser.Error:
            return configparser.ConfigParser(interpolation=None)
    return parser


def _write_parser(parser):
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as f:
        parser.write(f)


def load_settings():
    parser = _read_parser()
    if "ui" not in parser:
        return dict(DEFAULT_SETTINGS)
    return _sanitize(dict(parser["ui"]))


def save_settings(settings):
    parser = _read_parser()
    parser["ui"] = _sanitize(settings)
    _write_parser(parser)


def load_local_path(target):
    parser = _read_parser()
    if "local_paths" not in parser:
        return None
    value = parser["local_paths"].get(target, "").strip()
    return value or None


def save_local_path(target, path):
    parser = _read_parser()
    if "local_paths" not in parser:
        parser["local_paths"] = {}
    parser["local_paths"][target] = path
    _write_parser(parser)
