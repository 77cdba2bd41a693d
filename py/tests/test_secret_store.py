from __future__ import annotations

import os
import sys
import unittest
from pathlib import Path
from unittest import mock

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from turbohttp.cookies import sign_cookie, unsign_cookie  # noqa: E402
from turbohttp.secret_store import (  # noqa: E402
    EnvSecret,
    SecretProvider,
    SecretsManagerSecret,
    StaticSecret,
    secret_bytes,
)


class _FakeSecretsManagerClient:
    def __init__(self, value: str | None = "from-aws") -> None:
        self.value = value
        self.calls: list[dict[str, object]] = []

    def get_secret_value(self, **kwargs):  # noqa: ANN003
        self.calls.append(dict(kwargs))
        if self.value is None:
            return {"ARN": "arn:aws:secretsmanager:us-east-1:0:secret:x"}
        return {"SecretString": self.value}


class TestSecretStore(unittest.TestCase):
    def test_secret_bytes_accepts_literals_and_providers(self) -> None:
        self.assertEqual(secret_bytes("k"), b"k")
        self.assertEqual(secret_bytes(b"k"), b"k")
        self.assertEqual(secret_bytes(StaticSecret("k")), b"k")
        with self.assertRaisesRegex(TypeError, "SecretProvider"):
            secret_bytes(123)  # type: ignore[arg-type]

    def test_env_secret(self) -> None:
        with mock.patch.dict(os.environ, {"COOKIE_SECRET": "env-value"}):
            self.assertEqual(EnvSecret("COOKIE_SECRET").get_secret(), "env-value")
        with mock.patch.dict(os.environ, {}, clear=True):
            with self.assertRaisesRegex(RuntimeError, "is not set"):
                EnvSecret("COOKIE_SECRET").get_secret()
        with self.assertRaisesRegex(RuntimeError, "name is empty"):
            EnvSecret(" ").get_secret()

    def test_secrets_manager_requires_secret_id(self) -> None:
        with self.assertRaisesRegex(RuntimeError, "secret id is empty"):
            SecretsManagerSecret("")

    def test_secrets_manager_fetches_once_and_caches(self) -> None:
        client = _FakeSecretsManagerClient()
        secret = SecretsManagerSecret("cookie-key", region="us-east-1", client=client)
        self.assertIsInstance(secret, SecretProvider)

        self.assertEqual(secret.get_secret(), "from-aws")
        self.assertEqual(secret.get_secret(), "from-aws")
        self.assertEqual(client.calls, [{"SecretId": "cookie-key"}])

        signed = sign_cookie("v", secret)
        self.assertEqual(unsign_cookie(signed, "from-aws"), "v")

    def test_secrets_manager_without_secret_string_raises(self) -> None:
        secret = SecretsManagerSecret("binary-only", client=_FakeSecretsManagerClient(value=None))
        with self.assertRaisesRegex(RuntimeError, "no SecretString"):
            secret.get_secret()

    def test_secrets_manager_builds_boto3_client_lazily(self) -> None:
        client = _FakeSecretsManagerClient("lazy")
        with mock.patch("boto3.client", return_value=client) as factory:
            secret = SecretsManagerSecret("cookie-key", region="eu-west-1")
            factory.assert_not_called()
            self.assertEqual(secret.get_secret(), "lazy")
        factory.assert_called_once_with("secretsmanager", region_name="eu-west-1")
