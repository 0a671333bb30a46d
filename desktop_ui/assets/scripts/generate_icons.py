from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

DISPLAY = 128
SCALE = 4
S = DISPLAY * SCALE

ICON_DIR = Path(__file__).resolve().parents[1] / "icons"

try:
    RESAMPLE = Image.Resampling.LANCZOS
except Exception:
    RESAMPLE = Image.LANCZOS

# name -> (background, foreground, glyph)
ICONS = {
    "drawio": ((240, 140, 30), (255, 255, 255), "D"),
    "typora": ((40, 40, 48), (240, 240, 240), "T"),
    "gemini": ((66, 133, 244), (255, 255, 255), "G"),
    "aistudio": ((26, 115, 232), (255, 255, 255), "AI"),
    "notebooklm": ((32, 33, 36), (255, 255, 255), "N"),
}


def get_font(size):
    for name in ("DejaVuSans-Bold.ttf", "Arial.ttf", "Helvetica.ttc"):
        try:
            return ImageFont.truetype(name, size=size)
        except Exception:
            continue
    return ImageFont.load_default()


def draw_glyph_icon(bg, fg, glyph, out_path):
    img = Image.new("RGBA", (S, S), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)
    m = 6 * SCALE
    d.rounded_rectangle((m, m, S - m - 1, S - m - 1), radius=24 * SCALE, fill=bg)
    font = get_font((56 if len(glyph) == 1 else 44) * SCALE)
    box = d.textbbox((0, 0), glyph, font=font)
    tw, th = box[2] - box[0], box[3] - box[1]
    d.text(((S - tw) / 2 - box[0], (S - th) / 2 - box[1]), glyph, fill=fg, font=font)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    img.resize((DISPLAY, DISPLAY), RESAMPLE).save(out_path, "PNG")


def draw_bucket(out_path):
    img = Image.new("RGBA", (S, S), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)
    top, bottom = 30 * SCALE, 110 * SCALE
    # tapered pail body with a rim and handle
    d.polygon([(22 * SCALE, top), (106 * SCALE, top), (94 * SCALE, bottom), (34 * SCALE, bottom)], fill=(234, 67, 53))
    d.rectangle((18 * SCALE, top - 8 * SCALE, 110 * SCALE, top + 6 * SCALE), fill=(251, 188, 5))
    d.arc((30 * SCALE, 4 * SCALE, 98 * SCALE, 60 * SCALE), start=180, end=360, fill=(52, 168, 83), width=6 * SCALE)
    for i, color in enumerate(((66, 133, 244), (52, 168, 83))):
        y = top + (24 + i * 28) * SCALE
        d.line((30 * SCALE, y, 98 * SCALE, y), fill=color, width=5 * SCALE)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    img.resize((DISPLAY, DISPLAY), RESAMPLE).save(out_path, "PNG")


def main():
    for name, (bg, fg, glyph) in ICONS.items():
        draw_glyph_icon(bg, fg, glyph, ICON_DIR / f"{name}.png")
    draw_bucket(ICON_DIR / "bucket.png")
    print(f"Generated {len(ICONS) + 1} icons in {ICON_DIR}.")


if __name__ == "__main__":
    main()
