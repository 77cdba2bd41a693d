from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SecretProvider(Protocol):
    def get_secret(self) -> str: ...


Secret = str | bytes | SecretProvider


@dataclass(slots=True)
class StaticSecret:
    value: str

    def get_secret(self) -> str:
        return str(self.value)


@dataclass(slots=True)
class EnvSecret:
    name: str

    def get_secret(self) -> str:
        key = str(self.name or "").strip()
        if not key:
            raise RuntimeError("turbohttp: secret env var name is empty")
        value = os.environ.get(key, "")
        if not value:
            raise RuntimeError(f"turbohttp: env var {key} is not set")
        return value


class SecretsManagerSecret:
    """Cookie secret stored in AWS Secrets Manager.

    The boto3 client is created on first use and the secret string is cached
    for the lifetime of the provider.
    """

    def __init__(self, secret_id: str, *, region: str | None = None, client: Any | None = None) -> None:
        value = str(secret_id or "").strip()
        if not value:
            raise RuntimeError("turbohttp: secrets manager secret id is empty")
        self.secret_id = value
        self.region = str(region).strip() if region else None
        self._boto = client
        self._cached: str | None = None

    def _client(self):
        if self._boto is not None:
            return self._boto

        try:
            import boto3  # type: ignore
        except ImportError as exc:
            raise RuntimeError("turbohttp: boto3 is required for secrets manager secrets") from exc

        self._boto = boto3.client("secretsmanager", region_name=self.region)
        return self._boto

    def get_secret(self) -> str:
        if self._cached is not None:
            return self._cached
        out = dict(self._client().get_secret_value(SecretId=self.secret_id) or {})
        value = out.get("SecretString")
        if not value:
            raise RuntimeError(f"turbohttp: secret {self.secret_id} has no SecretString")
        self._cached = str(value)
        return self._cached


def secret_bytes(secret: Secret) -> bytes:
    if isinstance(secret, bytes):
        return secret
    if isinstance(secret, str):
        return secret.encode("utf-8")
    if isinstance(secret, SecretProvider):
        return str(secret.get_secret()).encode("utf-8")
    raise TypeError("secret must be str, bytes or a SecretProvider")
