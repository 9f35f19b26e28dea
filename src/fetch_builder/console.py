"""
Console tracing of requests and responses with Rich.
"""
import json
from typing import Any, Dict, Optional

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

SENSITIVE_HEADERS = ("authorization", "x-api-key", "proxy-authorization", "cookie")

console = Console(stderr=True)


def mask_value(value: Optional[str], visible_chars: int = 10) -> str:
    """Mask sensitive value for logging, showing the first visible_chars."""
    if not value:
        return "<empty>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def mask_headers(headers: Any) -> Dict[str, str]:
    """Copy headers with credentials masked for safe logging."""
    items = headers.multi_items() if isinstance(headers, httpx.Headers) else headers.items()
    masked: Dict[str, str] = {}
    for key, value in items:
        if isinstance(value, (list, tuple)):
            value = ", ".join(value)
        masked[key] = mask_value(value) if key.lower() in SENSITIVE_HEADERS else value
    return masked


def _format_body(content: bytes) -> str:
    """Pretty format JSON bodies, decode text ones."""
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary data: {len(content)} bytes>"
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        return text


def print_request(request: httpx.Request) -> None:
    """Print method, URL, masked headers and the body when already buffered."""
    console.print(
        Panel(f"[bold cyan]{request.method}[/bold cyan] {request.url}", title="[bold blue]Request[/bold blue]")
    )
    console.print("[bold]Headers:[/bold]", mask_headers(request.headers))
    # streaming bodies are not read here, that would consume them
    try:
        content = request.content
    except httpx.RequestNotRead:
        content = b""
    if content:
        console.print(
            Panel(Syntax(_format_body(content), "json", theme="monokai"), title="[bold]Request Body[/bold]")
        )


def print_response(response: httpx.Response) -> None:
    """Print status, headers and the body when already read."""
    status_color = "green" if 200 <= response.status_code <= 299 else "red"
    try:
        url = response.request.url
    except RuntimeError:
        url = ""
    console.print(
        Panel(
            f"[bold {status_color}]{response.status_code}[/bold {status_color}] {response.reason_phrase or ''}",
            title=f"[bold blue]Response[/bold blue] ({url})",
        )
    )
    console.print("[bold]Headers:[/bold]", mask_headers(response.headers))
    try:
        content = response.content
    except httpx.ResponseNotRead:
        content = b""
    if content:
        console.print(
            Panel(Syntax(_format_body(content), "json", theme="monokai"), title="[bold]Response Body[/bold]")
        )
