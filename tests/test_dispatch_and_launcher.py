import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

from desktop_ui import launcher, settings_store
from workspace.dispatch import ActionDispatcher
from workspace.errors import CollaboratorFailure, LocalPathNotConfigured, ValidationError


class ActionDispatcherTestCase(unittest.TestCase):
    def test_synchronous_success_and_failure(self):
        dispatcher = ActionDispatcher(synchronous=True)
        seen = []

        def fail(reason):
            raise CollaboratorFailure(reason)

        dispatcher.submit(lambda x: x * 2, 21, on_success=seen.append)
        dispatcher.submit(fail, "boom", on_failure=lambda exc: seen.append(exc.reason))
        self.assertEqual([42, "boom"], seen)

    def test_unexpected_exception_becomes_collaborator_failure(self):
        dispatcher = ActionDispatcher(synchronous=True)
        seen = []

        def explode():
            raise RuntimeError("disk on fire")

        with self.assertLogs("workspace.dispatch", level="ERROR"):
            dispatcher.submit(explode, on_failure=seen.append)
        self.assertIsInstance(seen[0], CollaboratorFailure)
        self.assertEqual("disk on fire", seen[0].reason)

    def test_threaded_results_wait_for_drain(self):
        dispatcher = ActionDispatcher()
        done = threading.Event()
        seen = []

        def work():
            done.set()
            return "ok"

        dispatcher.submit(work, on_success=seen.append)
        self.assertTrue(done.wait(5))
        for _ in range(100):
            if not dispatcher.results.empty():
                break
            threading.Event().wait(0.01)
        self.assertEqual([], seen)
        self.assertEqual(1, dispatcher.drain())
        self.assertEqual(["ok"], seen)


class LauncherTestCase(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.ini_path = Path(self._td.name) / "settings.ini"
        self._patch = patch.object(settings_store, "SETTINGS_PATH", self.ini_path)
        self._patch.start()

    def tearDown(self):
        self._patch.stop()
        self._td.cleanup()

    def test_open_link_uses_platform_opener(self):
        with patch.object(launcher, "_spawn") as spawn, patch.object(launcher.sys, "platform", "linux"):
            launcher.open_link("https://example.com/")
        spawn.assert_called_once_with(["xdg-open", "https://example.com/"])

    def test_open_link_failure_carries_reason(self):
        with patch.object(launcher, "_spawn", side_effect=OSError("no opener")):
            with self.assertRaises(CollaboratorFailure) as ctx:
                launcher.open_link("https://example.com/")
        self.assertIn("no opener", ctx.exception.reason)

    def test_set_and_get_local_path_strips_quotes(self):
        self.assertIsNone(launcher.get_configured_local_path("typora"))
        saved = launcher.set_configured_local_path('  "C:\\Apps\\Typora 100%\\Typora.exe" ', "typora")
        self.assertEqual("C:\\Apps\\Typora 100%\\Typora.exe", saved)
        self.assertEqual(saved, launcher.get_configured_local_path("typora"))

    def test_set_local_path_rejects_empty(self):
        with self.assertRaises(ValidationError):
            launcher.set_configured_local_path('  ""  ', "typora")
        self.assertIsNone(launcher.get_configured_local_path("typora"))

    def test_local_path_does_not_clobber_ui_settings(self):
        settings_store.save_settings({"theme_name": "Ocean"})
        launcher.set_configured_local_path("/opt/typora/Typora", "typora")
        self.assertEqual("Ocean", settings_store.load_settings()["theme_name"])

    def test_launch_local_without_path_needs_configuration(self):
        with self.assertRaises(LocalPathNotConfigured) as ctx:
            launcher.launch_local("typora")
        self.assertEqual("typora", ctx.exception.target)
        self.assertIsInstance(ctx.exception, CollaboratorFailure)

    def test_launch_local_uses_configured_path(self):
        launcher.set_configured_local_path("/opt/typora/Typora", "typora")
        with patch.object(launcher, "_spawn") as spawn:
            launcher.launch_local("typora")
        spawn.assert_called_once_with(["/opt/typora/Typora"])

    def test_launch_local_accepts_existing_executable_target(self):
        exe = Path(self._td.name) / "tool.sh"
        exe.write_text("#!/bin/sh\n", encoding="utf-8")
        with patch.object(launcher, "_spawn") as spawn:
            launcher.launch_local(str(exe))
        spawn.assert_called_once_with([str(exe)])

    def test_launch_local_spawn_failure(self):
        launcher.set_configured_local_path("/missing/typora", "typora")
        with patch.object(launcher, "_spawn", side_effect=FileNotFoundError("nope")):
            with self.assertRaises(CollaboratorFailure) as ctx:
                launcher.launch_local("typora")
        self.assertNotIsInstance(ctx.exception, LocalPathNotConfigured)

    def test_auto_detect_checks_candidates(self):
        exe = Path(self._td.name) / "Typora"
        exe.write_text("", encoding="utf-8")
        candidates = {"typora": {"linux": ("/does/not/exist", str(exe))}}
        with patch.object(launcher, "platform_key", return_value="linux"), patch.object(
            launcher, "LOCAL_APP_CANDIDATES", candidates
        ), patch.object(launcher, "which", return_value=None):
            self.assertEqual(str(exe), launcher.auto_detect_local_path("typora"))

    def test_auto_detect_returns_none_when_absent(self):
        with patch.object(launcher, "platform_key", return_value="linux"), patch.object(
            launcher, "LOCAL_APP_CANDIDATES", {}
        ), patch.object(launcher, "which", return_value=None):
            self.assertIsNone(launcher.auto_detect_local_path("typora"))


class SettingsStoreTestCase(unittest.TestCase):
    def test_sanitize_unknown_values(self):
        with tempfile.TemporaryDirectory() as td:
            ini_path = Path(td) / "settings.ini"
            ini_path.write_text(
                "[ui]\ntheme_name = Neon\nfont_scale = Large\nlog_level = debug\nreservoir_open = yes\n",
                encoding="utf-8",
            )
            with patch.object(settings_store, "SETTINGS_PATH", ini_path):
                data = settings_store.load_settings()
        self.assertEqual("Forest", data["theme_name"])
        self.assertEqual("Large", data["font_scale"])
        self.assertEqual("DEBUG", data["log_level"])
        self.assertEqual("1", data["reservoir_open"])

    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            with patch.object(settings_store, "SETTINGS_PATH", Path(td) / "missing.ini"):
                self.assertEqual(settings_store.DEFAULT_SETTINGS, settings_store.load_settings())


if __name__ == "__main__":
    unittest.main()
