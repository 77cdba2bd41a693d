from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from turbohttp.config import RequestConfig, normalize_request_config, request_config_from_env  # noqa: E402


class TestConfig(unittest.TestCase):
    def test_normalize_request_config_sets_defaults(self) -> None:
        self.assertEqual(normalize_request_config(None), RequestConfig())

        cfg = normalize_request_config(RequestConfig(max_body_bytes=-5, default_host="  "))
        self.assertEqual(cfg.max_body_bytes, 0)
        self.assertEqual(cfg.default_host, "localhost")

        cfg2 = normalize_request_config(RequestConfig(max_body_bytes="bad", default_host=" api "))  # type: ignore[arg-type]
        self.assertEqual(cfg2.max_body_bytes, 0)
        self.assertEqual(cfg2.default_host, "api")

    def test_request_config_from_env(self) -> None:
        cfg = request_config_from_env(environ={"TURBOHTTP_MAX_BODY_BYTES": "1024", "TURBOHTTP_DEFAULT_HOST": "svc"})
        self.assertEqual(cfg, RequestConfig(max_body_bytes=1024, default_host="svc"))

        custom = request_config_from_env(prefix="APP_", environ={"APP_MAX_BODY_BYTES": "nope"})
        self.assertEqual(custom, RequestConfig())

        self.assertEqual(request_config_from_env(environ={}), RequestConfig())
