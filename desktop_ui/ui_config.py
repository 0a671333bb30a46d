import sys

FPS_MS = 16

TILE_SIZE = 96
TILE_ICON_RATIO = 0.62
RESERVOIR_SIZE = 72
RESERVOIR_MARGIN = 24
RESERVOIR_ITEM_HEIGHT = 44
RESERVOIR_MENU_WIDTH = 220
TOAST_WIDTH = 300
TOAST_HEIGHT = 40
TOAST_GAP = 8

MAX_ICON_BYTES = 2 * 1024 * 1024
ICON_PIXELS = 128
ICON_FILE_TYPES = (("图片", "*.png *.jpg *.jpeg *.gif *.bmp *.webp *.ico"), ("全部文件", "*.*"))

THEME_ORDER = ("Forest", "Ocean", "Sunset")
FONT_SCALE_ORDER = ("Small", "Normal", "Large")
FONT_SCALE_FACTOR = {"Small": 0.9, "Normal": 1.0, "Large": 1.2}
LOG_LEVEL_ORDER = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_LOCAL_TARGET = "typora"

# Candidate install locations per launch target, checked in order.
LOCAL_APP_CANDIDATES = {
    "typora": {
        "win32": (
            r"C:\Program Files\Typora\Typora.exe",
            r"C:\Program Files (x86)\Typora\Typora.exe",
            r"{USERPROFILE}\AppData\Local\Programs\Typora\Typora.exe",
            r"{LOCALAPPDATA}\Typora\Typora.exe",
        ),
        "darwin": ("/Applications/Typora.app/Contents/MacOS/Typora",),
        "linux": ("/usr/bin/typora", "/usr/local/bin/typora", "/opt/typora/Typora", "/snap/bin/typora"),
    },
}
LOCAL_APP_EXECUTABLES = {"typora": {"win32": "Typora.exe", "darwin": "Typora", "linux": "typora"}}


def platform_key():
    if sys.platform == "win32":
        return "win32"
    if sys.platform == "darwin":
        return "darwin"
    return "linux"


THEMES = {
    "Forest": {
        "bg_base": "#1b4332",
        "bg_band_a": "#315d49",
        "bg_band_b": "#244636",
        "hud_text": "#f1f5f9",
        "hud_subtext": "#d1fae5",
        "tile_fill": "#2d6a4f",
        "tile_outline": "#a7f3d0",
        "tile_drag": "#fde047",
        "reservoir_fill": "#0f766e",
        "reservoir_hover": "#4ade80",
        "menu_fill": "#f8fafc",
        "menu_text": "#0f172a",
    },
    "Ocean": {
        "bg_base": "#0b2545",
        "bg_band_a": "#1f4f73",
        "bg_band_b": "#123552",
        "hud_text": "#e0f2fe",
        "hud_subtext": "#bae6fd",
        "tile_fill": "#0369a1",
        "tile_outline": "#7dd3fc",
        "tile_drag": "#38bdf8",
        "reservoir_fill": "#1d4ed8",
        "reservoir_hover": "#22d3ee",
        "menu_fill": "#f8fafc",
        "menu_text": "#082f49",
    },
    "Sunset": {
        "bg_base": "#3f1d38",
        "bg_band_a": "#7c2d4f",
        "bg_band_b": "#5b2141",
        "hud_text": "#fff7ed",
        "hud_subtext": "#fed7aa",
        "tile_fill": "#b45309",
        "tile_outline": "#fcd34d",
        "tile_drag": "#fb7185",
        "reservoir_fill": "#7c2d12",
        "reservoir_hover": "#f59e0b",
        "menu_fill": "#fffbeb",
        "menu_text": "#431407",
    },
}

TOAST_COLORS = {
    "info": "#334155",
    "success": "#15803d",
    "error": "#b91c1c",
}
