import sys
import tempfile
import types
import unittest
from pathlib import Path

from websockets.datastructures import Headers
from websockets.http11 import Request

# Import server.service without executing src/server/__init__.py.
_SERVER_DIR = Path(__file__).resolve().parents[2] / "src" / "server"
if "server" not in sys.modules:
    _pkg = types.ModuleType("server")
    _pkg.__path__ = [str(_SERVER_DIR)]  # type: ignore[attr-defined]
    sys.modules["server"] = _pkg

from server.config import UIServerConfig
from server.events import UICommand
from server.service import UIServer


class UIServerRoutingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        index = Path(self._temp_dir.name) / "index.html"
        index.write_text("<html>timer</html>", encoding="utf-8")
        self.commands: list[UICommand] = []
        self.server = UIServer(
            UIServerConfig(index_file=str(index)),
            on_command=self.commands.append,
        )

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def _get(self, path: str):
        return self.server._route_request(None, Request(path=path, headers=Headers()))  # type: ignore[arg-type]

    def test_index_and_health_routes(self) -> None:
        for path in ("/", "/index.html"):
            with self.subTest(path=path):
                response = self._get(path)
                self.assertEqual(200, response.status_code)
                self.assertEqual(b"<html>timer</html>", response.body)
                self.assertIn("text/html", response.headers["Content-Type"])

        health = self._get("/healthz?probe=1")
        self.assertEqual(200, health.status_code)
        self.assertEqual(b"ok\n", health.body)

    def test_websocket_path_is_left_to_handshake(self) -> None:
        self.assertIsNone(self._get("/ws"))

    def test_unknown_path_is_not_found(self) -> None:
        response = self._get("/settings")

        self.assertEqual(404, response.status_code)
        self.assertEqual("Not Found", response.reason_phrase)

    def test_inbound_commands_reach_the_sink(self) -> None:
        self.server._dispatch('{"type": "command", "action": "toggle"}')

        with self.assertLogs("ui_server", level="WARNING"):
            self.server._dispatch('{"type": "command", "action": "explode"}')

        self.assertEqual([UICommand(action="toggle")], self.commands)

    def test_publish_before_start_keeps_sticky_session(self) -> None:
        self.server.publish("session", state="idle")
        self.server.publish("hello", message="ignored")

        self.assertFalse(self.server.is_running)
        self.assertEqual(1, len(self.server._sticky_events.snapshot()))


if __name__ == "__main__":
    unittest.main()
