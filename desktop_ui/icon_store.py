import base64
import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from desktop_ui.ui_config import ICON_PIXELS, MAX_ICON_BYTES
from workspace.errors import ValidationError

log = logging.getLogger(__name__)

ICON_DIR = Path(__file__).with_name("assets").joinpath("icons")
BUILTIN_PREFIX = "builtin:"
DATA_URL_PREFIX = "data:image/png;base64,"

try:
    RESAMPLE = Image.Resampling.LANCZOS
except AttributeError:
    RESAMPLE = Image.LANCZOS


def load_icon_blob(path, max_bytes=MAX_ICON_BYTES) -> str:
    """Read an uploaded image into a PNG data URL, scaled down to ``ICON_PIXELS``."""
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ValidationError(f"无法读取图标: {exc}") from exc
    if size > max_bytes:
        raise ValidationError(f"图标文件过大（{size // 1024} KB，上限 {max_bytes // 1024} KB）")
    try:
        with Image.open(path) as img:
            img = img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as exc:
        raise ValidationError(f"不是有效的图片: {path.name}") from exc
    img.thumbnail((ICON_PIXELS, ICON_PIXELS), RESAMPLE)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return DATA_URL_PREFIX + base64.b64encode(buf.getvalue()).decode("ascii")


def builtin_icon_path(name) -> Path:
    return ICON_DIR / f"{name}.png"


def open_icon(icon_ref):
    """Decode ``icon_ref`` into a PIL image, or None when it cannot be shown."""
    if not icon_ref:
        return None
    try:
        if icon_ref.startswith(BUILTIN_PREFIX):
            path = builtin_icon_path(icon_ref[len(BUILTIN_PREFIX):])
            if not path.exists():
                return None
            with Image.open(path) as img:
                return img.convert("RGBA")
        if icon_ref.startswith("data:"):
            _, _, payload = icon_ref.partition(",")
            with Image.open(io.BytesIO(base64.b64decode(payload))) as img:
                return img.convert("RGBA")
        path = Path(icon_ref)
        if path.exists():
            with Image.open(path) as img:
                return img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        log.warning("Cannot decode icon %.40s: %s", icon_ref, exc)
    return None


def fit_icon(img, size):
    out = img.copy()
    out.thumbnail((size, size), RESAMPLE)
    return out
