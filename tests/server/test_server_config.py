import unittest

from app_config_schema import UIServerSettings
from server import StickyEventStore, UIServer
from server.config import ServerConfigurationError, UIServerConfig


class UIServerConfigTests(unittest.TestCase):
    def test_from_settings_copies_and_strips_values(self) -> None:
        settings = UIServerSettings(enabled=True, host=" 0.0.0.0 ", port=9000)

        config = UIServerConfig.from_settings(settings)

        self.assertTrue(config.enabled)
        self.assertEqual("0.0.0.0", config.host)
        self.assertEqual(9000, config.port)
        self.assertEqual("/ws", config.websocket_path)

    def test_rejects_empty_host(self) -> None:
        with self.assertRaises(ServerConfigurationError):
            UIServerConfig(host="  ")

    def test_rejects_out_of_range_port(self) -> None:
        for port in (-1, 70000):
            with self.subTest(port=port):
                with self.assertRaises(ServerConfigurationError):
                    UIServerConfig(port=port)


class UIServerPublishTests(unittest.TestCase):
    def test_publish_before_start_still_remembers_sticky_events(self) -> None:
        sticky_events = StickyEventStore()
        server = UIServer(UIServerConfig(), sticky_events=sticky_events)

        server.publish("session", at=0.0, state="running")
        server.publish("countdown", at=0.0, seconds=3)

        self.assertFalse(server.is_running)
        self.assertEqual(1, len(sticky_events.snapshot()))


if __name__ == "__main__":
    unittest.main()
