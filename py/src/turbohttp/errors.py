from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AppError(Exception):
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


def status_for_error_code(code: str) -> int:
    match code:
        case "app.bad_request":
            return 400
        case "app.timeout":
            return 408
        case "app.too_large":
            return 413
        case "app.client_disconnected":
            return 499
        case _:
            return 500
