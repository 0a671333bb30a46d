import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from PIL import Image

from desktop_ui import desktop_interface
from desktop_ui.desktop_interface import WorkspaceTkInterface
from workspace.cards import Position
from workspace.containment import Rect
from workspace.dispatch import ActionDispatcher
from workspace.errors import CollaboratorFailure, LocalPathNotConfigured
from workspace.layout_store import KeyValueStore, LayoutStore


def ev(x, y):
    return SimpleNamespace(x=x, y=y)


class WorkspaceTkInterfaceTestCase(unittest.TestCase):
    @staticmethod
    def _ui_settings():
        return {"theme_name": "Forest", "font_scale": "Normal", "log_level": "INFO", "reservoir_open": "0"}

    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.store_path = Path(self._td.name) / "workspace_store.json"
        patches = [
            patch.object(desktop_interface, "load_settings", return_value=self._ui_settings()),
            patch.object(desktop_interface, "save_settings"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        self.ui = self.make_ui()

    def tearDown(self):
        self._td.cleanup()

    def make_ui(self):
        store = LayoutStore(KeyValueStore(self.store_path))
        return WorkspaceTkInterface(layout_store=store, dispatcher=ActionDispatcher(synchronous=True))

    def test_starts_with_default_layout(self):
        self.assertEqual(["drawio", "typora", "gemini"], [t.id for t in self.ui.vm.tiles])
        self.assertEqual(["aistudio", "notebooklm"], [r.id for r in self.ui.vm.reservoir])
        self.assertEqual(Rect(1104, 664, 1176, 736), self.ui.reservoir_rect())

    def test_drag_into_reservoir_commits_and_suppresses_launch(self):
        with patch.object(desktop_interface, "open_link") as open_link:
            self.ui.on_press(ev(310, 210))
            self.ui.on_drag(ev(700, 500))
            self.ui.on_drag(ev(1140, 700))
            self.assertEqual(Position(300, 200), self.ui.registry.get("drawio").position)
            self.ui.on_release(ev(1140, 700))
        open_link.assert_not_called()
        card = self.ui.registry.get("drawio")
        self.assertEqual(Position(1130, 690), card.position)
        self.assertTrue(card.contained)
        self.assertIn("drawio", [r.id for r in self.ui.vm.reservoir])
        self.assertEqual("success", self.ui.notifications.active()[-1].severity)

    def test_failed_save_is_toasted_and_drop_still_lands(self):
        blocker = Path(self._td.name) / "blocker"
        blocker.write_text("", encoding="utf-8")
        self.store_path = blocker / "workspace_store.json"
        ui = self.make_ui()
        with self.assertLogs("workspace.layout_store", level="WARNING"):
            ui.on_press(ev(310, 210))
            ui.on_drag(ev(1140, 700))
            ui.on_release(ev(1140, 700))
        self.assertIsNone(ui.drag.session)
        self.assertIn("drawio", [r.id for r in ui.vm.reservoir])
        self.assertEqual(["error", "success"], [t.severity for t in ui.notifications.active()])

    def test_layout_survives_restart(self):
        self.ui.on_press(ev(510, 210))
        self.ui.on_drag(ev(110, 610))
        self.ui.on_release(ev(110, 610))
        again = self.make_ui()
        self.assertEqual(Position(100, 600), again.registry.get("typora").position)

    def test_click_opens_link(self):
        with patch.object(desktop_interface, "open_link") as open_link:
            self.ui.on_press(ev(320, 220))
            self.ui.on_release(ev(320, 220))
        open_link.assert_called_once_with("https://app.diagrams.net/")

    def test_link_failure_is_toasted_with_reason(self):
        with patch.object(desktop_interface, "open_link", side_effect=CollaboratorFailure("no browser")):
            self.ui.activate_card("gemini")
        toast = self.ui.notifications.active()[-1]
        self.assertEqual("error", toast.severity)
        self.assertIn("no browser", toast.text)

    def test_unconfigured_local_launch_asks_for_path(self):
        with patch.object(desktop_interface, "launch_local", side_effect=LocalPathNotConfigured("typora")), patch.object(
            desktop_interface, "auto_detect_local_path", return_value=None
        ):
            self.ui.activate_card("typora")
        self.assertEqual("typora", self.ui.pending_path_target)
        self.assertEqual([], self.ui.notifications.active())

    def test_other_local_launch_failure_is_toasted(self):
        with patch.object(desktop_interface, "launch_local", side_effect=CollaboratorFailure("permission denied")):
            self.ui.activate_card("typora")
        self.assertIsNone(self.ui.pending_path_target)
        self.assertIn("permission denied", self.ui.notifications.active()[-1].text)

    def test_save_local_path_then_launch(self):
        with patch.object(desktop_interface, "set_configured_local_path", return_value="/opt/typora") as set_path, patch.object(
            desktop_interface, "launch_local"
        ) as launch:
            self.ui.save_local_path("typora", '"/opt/typora"')
        set_path.assert_called_once_with('"/opt/typora"', "typora")
        launch.assert_called_once_with("typora")
        self.assertEqual("success", self.ui.notifications.active()[-1].severity)

    def test_save_empty_local_path_is_rejected(self):
        with patch.object(desktop_interface, "set_configured_local_path") as set_path:
            self.ui.save_local_path("typora", '  ""  ')
        set_path.assert_not_called()
        self.assertEqual("error", self.ui.notifications.active()[-1].severity)

    def test_reservoir_click_toggles_menu(self):
        self.ui.on_press(ev(1140, 700))
        self.ui.on_release(ev(1140, 700))
        self.assertTrue(self.ui.reservoir_open)
        self.ui.on_press(ev(1140, 700))
        self.ui.on_release(ev(1140, 700))
        self.assertFalse(self.ui.reservoir_open)

    def test_reservoir_entry_click_launches_in_place(self):
        self.ui.reservoir_open = True
        with patch.object(desktop_interface, "open_link") as open_link:
            self.ui.on_press(ev(1000, 620))
            self.ui.on_release(ev(1000, 620))
        open_link.assert_called_once_with("https://aistudio.google.com/")
        self.assertTrue(self.ui.registry.get("aistudio").contained)
        self.assertIsNone(self.ui.drag.session)

    def test_reservoir_entry_can_be_dragged_out(self):
        self.ui.reservoir_open = True
        with patch.object(desktop_interface, "open_link") as open_link:
            self.ui.on_press(ev(1000, 620))
            self.ui.on_drag(ev(600, 400))
            self.ui.on_release(ev(600, 400))
        open_link.assert_not_called()
        card = self.ui.registry.get("aistudio")
        self.assertFalse(card.contained)
        self.assertEqual(Position(556, 388), card.position)

    def test_focus_out_abandons_drag(self):
        self.ui.on_press(ev(410, 360))
        self.ui.on_drag(ev(210, 160))
        self.ui.on_focus_out(SimpleNamespace())
        self.assertIsNone(self.ui.drag.session)
        self.assertEqual(Position(200, 150), self.ui.registry.get("gemini").position)

    def test_add_card_validation_and_success(self):
        self.ui.add_card("", "https://x.example", "")
        self.assertEqual(5, len(self.ui.registry))
        self.assertEqual("error", self.ui.notifications.active()[-1].severity)

        icon_path = Path(self._td.name) / "x.png"
        Image.new("RGB", (32, 32), (0, 128, 255)).save(icon_path)
        card = self.ui.add_card("X", "https://x.example", str(icon_path))
        self.assertIsNotNone(card)
        self.assertEqual(6, len(self.ui.registry))
        self.assertEqual(Position(600, 380), card.position)
        self.assertIn(card.id, [t.id for t in self.ui.vm.tiles])

    def test_reset_layout(self):
        self.ui.registry.commit_move("gemini", Position(5, 5), True)
        self.ui.reset_layout()
        gemini = self.ui.registry.get("gemini")
        self.assertEqual(Position(400, 350), gemini.position)
        self.assertFalse(gemini.contained)
        self.assertEqual([], list(self.ui.vm.reservoir))


if __name__ == "__main__":
    unittest.main()
