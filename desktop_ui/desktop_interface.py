import logging
from tkinter import BOTH, Canvas, Tk, filedialog, messagebox, simpledialog

from PIL import ImageTk

from desktop_ui.adapter import RegistryAdapter
from desktop_ui.icon_store import fit_icon, load_icon_blob, open_icon
from desktop_ui.launcher import (
    auto_detect_local_path,
    get_configured_local_path,
    launch_local,
    normalize_path,
    open_link,
    set_configured_local_path,
)
from desktop_ui.settings_store import load_settings, save_settings
from desktop_ui.tile_face import TileFaceRenderer
from desktop_ui.ui_config import (
    FONT_SCALE_FACTOR,
    FPS_MS,
    ICON_FILE_TYPES,
    RESERVOIR_ITEM_HEIGHT,
    RESERVOIR_MARGIN,
    RESERVOIR_MENU_WIDTH,
    RESERVOIR_SIZE,
    THEME_ORDER,
    THEMES,
    TILE_ICON_RATIO,
    TILE_SIZE,
    TOAST_COLORS,
    TOAST_GAP,
    TOAST_HEIGHT,
    TOAST_WIDTH,
)
from workspace.cards import NETWORK_LINK, Position, default_cards, default_positions
from workspace.containment import Rect, contains_point
from workspace.dispatch import ActionDispatcher
from workspace.drag import DragController
from workspace.errors import LocalPathNotConfigured, ValidationError
from workspace.interface import Interface
from workspace.layout_store import LayoutStore
from workspace.logging_utils import configure_logging
from workspace.notifications import NotificationQueue
from workspace.registry import CardRegistry

log = logging.getLogger(__name__)

PRESS_TILE = "tile"
PRESS_ITEM = "item"
PRESS_RESERVOIR = "reservoir"


class WorkspaceTkInterface(Interface):
    def __init__(self, width=1200, height=760, layout_store=None, dispatcher=None, notifications=None):
        super().__init__()
        self.width = width
        self.height = height
        self.root = None
        self.canvas = None

        self.theme_name = "Forest"
        self.font_scale = "Normal"
        self.log_level = "INFO"
        self.reservoir_open = False
        self.load_persisted_settings()

        self.layout_store = layout_store if layout_store is not None else LayoutStore()
        cards = self.layout_store.load(default_cards())
        registry = CardRegistry(cards, store=self.layout_store, viewport=(width, height))
        registry.registerInterface(self)

        self.notifications = notifications if notifications is not None else NotificationQueue()
        self.drag = DragController(self.registry, self.notifications)
        self.dispatcher = dispatcher if dispatcher is not None else ActionDispatcher()

        self.vm = None
        self.press_target = None
        self.pending_path_target = None
        self.tile_renderer = TileFaceRenderer()
        self.icon_sources = {}
        self.icon_images = {}
        self.needs_redraw = True
        self.refresh_view()

    def run(self):
        self.root = Tk()
        self.root.title("Alpha 工作台")
        self.root.resizable(True, True)
        self.canvas = Canvas(self.root, width=self.width, height=self.height, highlightthickness=0, bd=0)
        self.canvas.pack(expand=1, fill=BOTH)
        self.notifications.scheduler = self.schedule_after

        self.root.bind("<Configure>", self.on_resize)
        self.root.bind("<Button-1>", self.on_press)
        self.root.bind("<B1-Motion>", self.on_drag)
        self.root.bind("<ButtonRelease-1>", self.on_release)
        self.root.bind("<FocusOut>", self.on_focus_out)
        self.root.bind("<Key>", self.on_key)
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        self.tick()
        self.root.mainloop()

    @property
    def theme(self):
        return THEMES[self.theme_name]

    def load_persisted_settings(self):
        settings = load_settings()
        self.theme_name = settings["theme_name"]
        self.font_scale = settings["font_scale"]
        self.log_level = settings["log_level"]
        self.reservoir_open = settings["reservoir_open"] == "1"

    def persist_settings(self):
        save_settings(
            {
                "theme_name": self.theme_name,
                "font_scale": self.font_scale,
                "log_level": self.log_level,
                "reservoir_open": "1" if self.reservoir_open else "0",
            }
        )

    def schedule_after(self, ms, callback):
        def fire():
            callback()
            self.request_redraw()

        self.root.after(ms, fire)

    def request_redraw(self):
        self.needs_redraw = True

    def refresh_view(self):
        self.vm = RegistryAdapter.snapshot(self.registry, self.drag)
        self.request_redraw()

    def notifyRedraw(self):
        self.refresh_view()

    def onPersistFailed(self):
        self.toast("布局保存失败，本次改动将不会保留", "error")

    def toast(self, text, severity="info"):
        self.notifications.push(text, severity)
        self.request_redraw()

    def fs(self, base):
        return max(8, int(base * FONT_SCALE_FACTOR[self.font_scale]))

    def cycle_value(self, order, current):
        idx = order.index(current)
        return order[(idx + 1) % len(order)]

    def on_close(self):
        if self.drag.dragging:
            self.drag.abandon(self.reservoir_rect)
        self.persist_settings()
        self.root.destroy()

    def on_resize(self, event):
        if event.widget != self.root:
            return
        self.width = event.width
        self.height = event.height
        self.registry.set_viewport(self.width, self.height)
        self.request_redraw()

    def on_key(self, event):
        if self.drag.dragging:
            return
        key = (event.keysym or "").lower()
        if key == "a":
            self.prompt_add_card()
        elif key == "r":
            self.confirm_reset_layout()
        elif key == "t":
            self.theme_name = self.cycle_value(THEME_ORDER, self.theme_name)
            self.persist_settings()
        elif key == "escape":
            self.set_reservoir_open(False)
        self.request_redraw()

    # Geometry.

    def reservoir_rect(self):
        x = self.width - RESERVOIR_SIZE - RESERVOIR_MARGIN
        y = self.height - RESERVOIR_SIZE - RESERVOIR_MARGIN
        return Rect.from_size(x, y, RESERVOIR_SIZE, RESERVOIR_SIZE)

    def reservoir_item_rect(self, idx):
        rect = self.reservoir_rect()
        x = rect.right - RESERVOIR_MENU_WIDTH
        y = rect.top - 8 - (idx + 1) * (RESERVOIR_ITEM_HEIGHT + 4)
        return Rect.from_size(x, y, RESERVOIR_MENU_WIDTH, RESERVOIR_ITEM_HEIGHT)

    def tile_rect(self, tile):
        return Rect.from_size(tile.x, tile.y, TILE_SIZE, TILE_SIZE)

    def find_tile_at(self, point):
        if self.vm is None:
            return None
        for tile in reversed(self.vm.tiles):
            if contains_point(self.tile_rect(tile), point):
                return tile
        return None

    def find_reservoir_item_at(self, point):
        if self.vm is None or not self.reservoir_open:
            return None
        for idx, item in enumerate(self.vm.reservoir):
            rect = self.reservoir_item_rect(idx)
            if contains_point(rect, point):
                return item, rect
        return None

    def set_reservoir_open(self, value):
        if self.reservoir_open == value:
            return
        self.reservoir_open = value
        self.persist_settings()
        self.request_redraw()

    # Pointer handling.

    def on_press(self, event):
        point = Position(event.x, event.y)
        if self.drag.dragging:
            return
        self.press_target = None

        if contains_point(self.reservoir_rect(), point):
            self.press_target = (PRESS_RESERVOIR, None)
            return

        hit = self.find_reservoir_item_at(point)
        if hit is not None:
            item, rect = hit
            if self.drag.press(item.id, point, origin=Position(rect.left, rect.top)):
                self.press_target = (PRESS_ITEM, item.id)
                self.refresh_view()
            return

        tile = self.find_tile_at(point)
        if tile is None:
            return
        if self.drag.press(tile.id, point):
            self.press_target = (PRESS_TILE, tile.id)
            self.refresh_view()

    def on_drag(self, event):
        if not self.drag.dragging:
            return
        self.drag.move(Position(event.x, event.y))
        self.request_redraw()

    def on_release(self, event):
        target = self.press_target
        self.press_target = None
        point = Position(event.x, event.y)

        if target is not None and target[0] == PRESS_RESERVOIR:
            if contains_point(self.reservoir_rect(), point):
                self.set_reservoir_open(not self.reservoir_open)
            return

        session = self.drag.session
        if session is None:
            return

        if target is not None and target[0] == PRESS_ITEM and not session.moved and point == session.press_pointer:
            # A plain click on a reservoir entry launches it and leaves it in the reservoir.
            self.drag.cancel()
            self.refresh_view()
            self.activate_card(session.card_id)
            return

        result = self.drag.release(self.reservoir_rect, point)
        self.refresh_view()
        if result is not None and self.drag.activate(result.card_id):
            self.activate_card(result.card_id)

    def on_focus_out(self, event):
        if not self.drag.dragging:
            return
        self.press_target = None
        self.drag.abandon(self.reservoir_rect)
        self.refresh_view()

    # Actions.

    def activate_card(self, card_id):
        card = self.registry.get(card_id)
        if card is None:
            return
        if card.kind == NETWORK_LINK:
            self.dispatcher.submit(
                open_link,
                card.action,
                on_failure=lambda exc: self.toast(f"打开失败: {exc.reason}", "error"),
            )
            return
        self.dispatcher.submit(launch_local, card.action, on_failure=self.on_local_launch_failed)

    def on_local_launch_failed(self, exc):
        if isinstance(exc, LocalPathNotConfigured):
            self.prompt_local_path(exc.target)
            return
        self.toast(f"启动失败: {exc.reason}", "error")

    def prompt_local_path(self, target):
        self.pending_path_target = target
        self.dispatcher.submit(
            auto_detect_local_path,
            target,
            on_success=lambda detected: self.show_path_dialog(target, detected),
            on_failure=lambda exc: self.show_path_dialog(target, None),
        )

    def show_path_dialog(self, target, detected):
        if self.root is None:
            return
        initial = detected or get_configured_local_path(target) or ""
        value = simpledialog.askstring(
            f"配置 {target} 路径",
            f"请输入 {target} 的完整路径：",
            initialvalue=initial,
            parent=self.root,
        )
        if value is None:
            self.pending_path_target = None
            return
        self.save_local_path(target, value)

    def save_local_path(self, target, raw_path):
        if not normalize_path(raw_path):
            self.toast("请输入有效的路径", "error")
            return
        self.pending_path_target = None

        def saved(_):
            self.toast(f"{target} 路径已保存！", "success")
            self.dispatcher.submit(
                launch_local,
                target,
                on_failure=lambda exc: self.toast(f"启动失败: {exc.reason}。请检查路径是否正确。", "error"),
            )

        self.dispatcher.submit(
            set_configured_local_path,
            raw_path,
            target,
            on_success=saved,
            on_failure=lambda exc: self.toast(f"保存失败: {exc.reason}", "error"),
        )

    def add_card(self, name, action, icon_path):
        try:
            icon_ref = load_icon_blob(icon_path) if icon_path else ""
            card = self.registry.add(name, action, icon_ref)
        except ValidationError as exc:
            self.toast(str(exc), "error")
            return None
        self.toast(f"已添加「{card.name}」", "success")
        return card

    def prompt_add_card(self):
        if self.root is None:
            return
        name = simpledialog.askstring("添加应用", "名称：", parent=self.root)
        if name is None:
            return
        action = simpledialog.askstring("添加应用", "网址或启动目标：", parent=self.root)
        if action is None:
            return
        icon_path = filedialog.askopenfilename(title="选择图标", filetypes=ICON_FILE_TYPES, parent=self.root)
        self.add_card(name, action, icon_path)

    def reset_layout(self):
        if self.drag.dragging:
            self.drag.abandon(self.reservoir_rect)
        self.registry.reset_to_defaults(default_positions())
        self.toast("布局已重置", "info")

    def confirm_reset_layout(self):
        if self.root is not None and not messagebox.askyesno("重置布局", "确定要恢复默认布局吗？"):
            return
        self.reset_layout()

    def tick(self):
        if self.dispatcher.drain():
            self.request_redraw()
        if self.needs_redraw:
            self.draw()
            self.needs_redraw = False
        self.root.after(FPS_MS, self.tick)

    # Drawing.

    def icon_image(self, icon_ref, size):
        key = (icon_ref, size)
        if key in self.icon_images:
            return self.icon_images[key]
        if icon_ref not in self.icon_sources:
            self.icon_sources[icon_ref] = open_icon(icon_ref)
        source = self.icon_sources[icon_ref]
        image = ImageTk.PhotoImage(fit_icon(source, size)) if source is not None else None
        self.icon_images[key] = image
        return image

    def draw(self):
        if self.canvas is None or self.vm is None:
            return
        c = self.canvas
        c.delete("all")
        self.draw_background(c)
        self.draw_tiles(c)
        self.draw_reservoir(c)
        self.draw_toasts(c)
        c.create_text(
            16,
            self.height - 16,
            anchor="sw",
            text="拖动图标整理桌面，拖入右下角收纳桶收起 | A 添加  R 重置  T 主题  Esc 收起菜单",
            fill=self.theme["hud_subtext"],
            font=f"Helvetica {self.fs(11)}",
        )

    def draw_background(self, c):
        theme = self.theme
        c.create_rectangle(0, 0, self.width, self.height, fill=theme["bg_base"], width=0)
        band_h = max(10, self.height // 18)
        for i in range(0, self.height + band_h, band_h):
            color = theme["bg_band_a"] if (i // band_h) % 2 == 0 else theme["bg_band_b"]
            c.create_rectangle(0, i, self.width, i + band_h, fill=color, width=0)
        c.create_text(self.width * 0.5, 18, text="Alpha内测版", fill=theme["hud_text"], font=f"Helvetica {self.fs(12)} bold")

    def draw_tiles(self, c):
        icon_px = int(TILE_SIZE * TILE_ICON_RATIO)
        for tile in self.vm.tiles:
            x, y = tile.x, tile.y
            if tile.dragging and self.drag.override is not None:
                live = self.drag.override[1]
                x, y = live.x, live.y
            self.tile_renderer.draw_tile(
                c,
                x,
                y,
                TILE_SIZE,
                tile.name,
                tile.kind,
                self.theme,
                FONT_SCALE_FACTOR[self.font_scale],
                self.icon_image(tile.icon_ref, icon_px),
                tile.dragging,
            )

    def draw_reservoir(self, c):
        theme = self.theme
        rect = self.reservoir_rect()
        hovering = False
        if self.drag.session is not None:
            hovering = contains_point(rect, self.drag.session.last_pointer)
        c.create_oval(
            rect.left,
            rect.top,
            rect.right,
            rect.bottom,
            fill=theme["reservoir_hover"] if hovering else theme["reservoir_fill"],
            outline=theme["tile_outline"],
            width=3 if hovering else 2,
        )
        icon = self.icon_image("builtin:bucket", int(RESERVOIR_SIZE * 0.6))
        if icon is not None:
            c.create_image((rect.left + rect.right) / 2, (rect.top + rect.bottom) / 2, image=icon)
        else:
            c.create_text(
                (rect.left + rect.right) / 2,
                (rect.top + rect.bottom) / 2,
                text=str(len(self.vm.reservoir)),
                fill=theme["hud_text"],
                font=f"Helvetica {self.fs(16)} bold",
            )

        if not self.reservoir_open:
            return
        if not self.vm.reservoir:
            empty = self.reservoir_item_rect(0)
            c.create_text(empty.right, empty.bottom, anchor="se", text="收纳桶是空的", fill=theme["hud_subtext"],
                          font=f"Helvetica {self.fs(11)}")
            return
        icon_px = int(RESERVOIR_ITEM_HEIGHT * 0.7)
        for idx, item in enumerate(self.vm.reservoir):
            item_rect = self.reservoir_item_rect(idx)
            self.tile_renderer.draw_reservoir_item(
                c,
                item_rect.left,
                item_rect.top,
                item_rect.width,
                item_rect.height,
                item.name,
                theme,
                FONT_SCALE_FACTOR[self.font_scale],
                self.icon_image(item.icon_ref, icon_px),
            )

    def draw_toasts(self, c):
        x2 = self.width - 16
        x1 = x2 - TOAST_WIDTH
        y = 16
        for toast in self.notifications.active():
            c.create_rectangle(x1, y, x2, y + TOAST_HEIGHT, fill=TOAST_COLORS[toast.severity], outline="")
            c.create_text(x1 + 12, y + TOAST_HEIGHT / 2, anchor="w", text=toast.text, fill="#f8fafc",
                          font=f"Helvetica {self.fs(11)}", width=TOAST_WIDTH - 24)
            y += TOAST_HEIGHT + TOAST_GAP


def main():
    settings = load_settings()
    configure_logging(settings["log_level"])
    log.info("Starting workspace")
    WorkspaceTkInterface().run()


if __name__ == "__main__":
    main()
