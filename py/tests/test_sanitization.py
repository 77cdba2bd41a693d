from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from turbohttp.sanitization import sanitize_header_value, sanitize_headers, sanitize_log_string  # noqa: E402


class TestSanitization(unittest.TestCase):
    def test_sanitize_log_string_strips_newlines(self) -> None:
        self.assertEqual(sanitize_log_string("a\nb\r\nc"), "abc")
        self.assertEqual(sanitize_log_string(""), "")

    def test_sensitive_headers_are_redacted(self) -> None:
        self.assertEqual(sanitize_header_value("Cookie", "sid=1"), "[REDACTED]")
        self.assertEqual(sanitize_header_value("authorization", "Bearer x"), "[REDACTED]")
        self.assertEqual(sanitize_header_value("accept", ["a\n", "b"]), ["a", "b"])

    def test_sanitize_headers(self) -> None:
        self.assertEqual(sanitize_headers(None), {})
        out = sanitize_headers({"Set-Cookie": ["a=1"], "host": "h\r\n"})
        self.assertEqual(out, {"Set-Cookie": "[REDACTED]", "host": "h"})
