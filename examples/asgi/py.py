import asyncio
import json as jsonlib
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "py" / "src"))

from turbohttp import Request, raw_request_from_asgi, sign_cookie, signed_cookies_middleware  # noqa: E402

SECRET = "example-secret"


async def app(scope, receive, send):
    req = Request(raw_request_from_asgi(scope, receive))

    async def stamp(r, next_handler):
        r.headers["x-middleware"] = "1"
        await next_handler()

    async def handler(r):
        payload = await r.parse_body_as_json()
        return {
            "path": r.path,
            "client_ip": r.get_client_ip(),
            "user": r.signed_cookies.get("user", ""),
            "payload": payload,
            "middleware": r.headers.get("x-middleware", ""),
        }

    req.use(signed_cookies_middleware(SECRET)).use(stamp)
    result = await req.execute_middlewares(handler)

    body = jsonlib.dumps(result, sort_keys=True).encode("utf-8")
    await send({"type": "http.response.start", "status": 200, "headers": [(b"content-type", b"application/json")]})
    await send({"type": "http.response.body", "body": body})


async def main() -> None:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/hello",
        "query_string": b"",
        "headers": [
            (b"host", b"example.com"),
            (b"cookie", f"user={sign_cookie('ada', SECRET)}".encode("latin-1")),
            (b"x-forwarded-for", b"203.0.113.9"),
        ],
        "client": ("10.0.0.1", 443),
    }
    messages = [{"type": "http.request", "body": b'{"hello": "world"}', "more_body": False}]
    sent: list[dict] = []

    async def receive():
        return messages.pop(0)

    async def send(message):
        sent.append(message)

    await app(scope, receive, send)

    out = jsonlib.loads(sent[1]["body"])
    assert out["path"] == "/hello"
    assert out["client_ip"] == "203.0.113.9"
    assert out["user"] == "ada"
    assert out["payload"] == {"hello": "world"}
    assert out["middleware"] == "1"

    print("examples/asgi/py.py: PASS")


if __name__ == "__main__":
    asyncio.run(main())
