from desktop_ui.ui_config import TILE_ICON_RATIO
from workspace.cards import LOCAL_LAUNCH


class TileFaceRenderer:
    def initials(self, name):
        text = (name or "?").strip()
        return text[:1].upper() if text else "?"

    def draw_tile(self, canvas, x, y, size, name, kind, theme, font_scale, icon_image, dragging):
        def fs(base):
            return max(8, int(base * font_scale))

        outline = theme["tile_drag"] if dragging else theme["tile_outline"]
        width = 3 if dragging else 1
        canvas.create_rectangle(x, y, x + size, y + size, fill=theme["tile_fill"], outline=outline, width=width)

        icon_box = size * TILE_ICON_RATIO
        cx = x + size * 0.5
        cy = y + 8 + icon_box * 0.5
        if icon_image is not None:
            canvas.create_image(cx, cy, image=icon_image)
        else:
            canvas.create_oval(cx - icon_box * 0.4, cy - icon_box * 0.4, cx + icon_box * 0.4, cy + icon_box * 0.4,
                               fill=theme["bg_band_a"], outline=theme["tile_outline"])
            canvas.create_text(cx, cy, text=self.initials(name), fill=theme["hud_text"],
                               font=f"Helvetica {fs(20)} bold")

        if kind == LOCAL_LAUNCH:
            # Small corner badge for apps started from disk.
            canvas.create_rectangle(x + size - 16, y + 4, x + size - 4, y + 16, fill=theme["tile_outline"], outline="")

        canvas.create_text(cx, y + size - 12, text=name, fill=theme["hud_text"], font=f"Helvetica {fs(11)} bold",
                           width=size - 8)

    def draw_reservoir_item(self, canvas, x, y, w, h, name, theme, font_scale, icon_image):
        fs = max(8, int(12 * font_scale))
        canvas.create_rectangle(x, y, x + w, y + h, fill=theme["menu_fill"], outline=theme["tile_outline"])
        text_x = x + 10
        if icon_image is not None:
            canvas.create_image(x + 8 + h * 0.35, y + h * 0.5, image=icon_image)
            text_x = x + 16 + h * 0.7
        canvas.create_text(text_x, y + h * 0.5, anchor="w", text=name, fill=theme["menu_text"],
                           font=f"Helvetica {fs}")
