import json
import logging
import unittest
import urllib.error
import urllib.request

from websockets.sync.client import connect

from server import UIServer, UIServerConfig


class UIServerRoutesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = {"isActive": True, "currentPhase": "RUN", "timeRemaining": 42}
        self.server = UIServer(
            UIServerConfig(enabled=True, host="127.0.0.1", port=0),
            state_provider=lambda: self.state,
            logger=logging.getLogger("test.ui_server"),
        )
        self.server.start(timeout_seconds=5.0)
        self.addCleanup(self.server.stop)

    def _get(self, path: str) -> tuple[int, bytes]:
        url = f"http://127.0.0.1:{self.server.port}{path}"
        try:
            with urllib.request.urlopen(url, timeout=5) as response:
                return response.status, response.read()
        except urllib.error.HTTPError as error:
            with error:
                return error.code, error.read()

    def test_binds_an_ephemeral_port(self) -> None:
        self.assertTrue(self.server.is_running)
        self.assertNotEqual(0, self.server.port)

    def test_healthz_reports_ok(self) -> None:
        self.assertEqual((200, b"ok\n"), self._get("/healthz"))

    def test_state_returns_provider_json(self) -> None:
        status, body = self._get("/state")

        self.assertEqual(200, status)
        self.assertEqual(self.state, json.loads(body))

    def test_state_without_provider_is_unavailable(self) -> None:
        self.server.set_state_provider(None)

        status, _ = self._get("/state")

        self.assertEqual(503, status)

    def test_unknown_path_is_not_found(self) -> None:
        status, _ = self._get("/nope")

        self.assertEqual(404, status)

    def test_websocket_client_gets_hello_then_sticky_replay(self) -> None:
        self.server.publish("session", at=0.0, state="running", phase="RUN")
        self.server.publish("countdown", at=0.0, seconds=3)

        with connect(f"ws://127.0.0.1:{self.server.port}/ws", open_timeout=5) as client:
            hello = json.loads(client.recv(timeout=5))
            replayed = json.loads(client.recv(timeout=5))

            self.server.publish("phase_change", at=1.0, phase="WALK")
            live = json.loads(client.recv(timeout=5))

        self.assertEqual("hello", hello["type"])
        self.assertEqual("session", replayed["type"])
        self.assertEqual("running", replayed["state"])
        self.assertEqual("1970-01-01T00:00:00+00:00", replayed["timestamp"])
        self.assertEqual("phase_change", live["type"])
        self.assertEqual("WALK", live["phase"])


if __name__ == "__main__":
    unittest.main()
