"""LM Studio integration via OpenAI-compatible Chat Completions API."""
from __future__ import annotations

import asyncio
import json
import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

DESCRIPTION_SYSTEM_PROMPT = """
You write short blurbs for songs on a music sharing site.

Rules:
1. Keep it under 40 words.
2. Sound like something you'd read on SoundCloud or a music blog.
3. Return plain text only. Do not use markdown syntax like **bold**, *italic* or # headings.
4. Do not mention these rules.
""".strip()


@dataclass(frozen=True)
class DescriptionRequest:
    title: str
    artist: str
    base_url: str
    api_key: str
    model: str
    timeout_seconds: int
    temperature: float
    max_tokens: int


class LmStudioError(RuntimeError):
    """Raised when LM Studio request fails or returns invalid payload."""


MARKDOWN_BOLD_RE = re.compile(r"\*\*(.+?)\*\*", re.DOTALL)
MARKDOWN_ITALIC_RE = re.compile(r"(?<!\*)\*(?!\*)(.+?)(?<!\*)\*(?!\*)", re.DOTALL)
MARKDOWN_UNDERSCORE_RE = re.compile(r"__(.+?)__", re.DOTALL)
MARKDOWN_HEADING_RE = re.compile(r"(?m)^\s*#+\s*")


def chat_completions_url(base_url: str) -> str:
    """Return the chat-completions endpoint, accepting bases with or without ``/v1``."""
    root = (base_url or "").strip().rstrip("/")
    if not root:
        raise LmStudioError("LM Studio base URL is empty.")
    if root.endswith("/v1"):
        root = root[: -len("/v1")]
    return f"{root}/v1/chat/completions"


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(str(part.get("text") or ""))
    return "\n".join(part for part in parts if part)


def _parse_chat_response(data: dict[str, Any]) -> str:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices or not isinstance(choices, list):
        raise LmStudioError("LM Studio response has no choices.")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise LmStudioError("LM Studio response has no message in the first choice.")
    text = _message_text(message.get("content")).strip()
    if not text:
        raise LmStudioError("LM Studio returned an empty message.")
    return text


def _sanitize_description(text: str) -> str:
    """Strip markdown markers, collapse whitespace and drop wrapping quotes."""
    cleaned = text.replace("\r\n", "\n")
    for _ in range(3):
        cleaned = MARKDOWN_BOLD_RE.sub(r"\1", cleaned)
        cleaned = MARKDOWN_UNDERSCORE_RE.sub(r"\1", cleaned)
        cleaned = MARKDOWN_ITALIC_RE.sub(r"\1", cleaned)
    cleaned = MARKDOWN_HEADING_RE.sub("", cleaned)
    cleaned = " ".join(cleaned.replace("**", "").split())
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned


def _request_timeout(timeout_seconds: Any) -> float | None:
    try:
        value = float(timeout_seconds)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def _post_chat_completion(
    *,
    base_url: str,
    api_key: str,
    timeout_seconds: int,
    payload: dict[str, object],
) -> dict[str, Any]:
    endpoint = chat_completions_url(base_url)
    http_request = urllib.request.Request(
        endpoint,
        data=json.dumps(payload).encode("utf-8"),
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {(api_key or 'lm-studio').strip()}",
        },
        method="POST",
    )
    timeout = _request_timeout(timeout_seconds)
    open_kwargs = {} if timeout is None else {"timeout": timeout}
    try:
        with urllib.request.urlopen(http_request, **open_kwargs) as response:
            raw = response.read().decode("utf-8")
    except urllib.error.HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace").strip()[:500] or "No body"
        raise LmStudioError(f"LM Studio HTTP {exc.code}: {detail}") from exc
    except TimeoutError as exc:
        raise LmStudioError("LM Studio request timed out.") from exc
    except OSError as exc:
        raise LmStudioError(f"Failed to reach LM Studio endpoint {endpoint}: {exc}") from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LmStudioError("LM Studio returned invalid JSON.") from exc


def build_description_prompt(title: str, artist: str) -> str:
    return (
        f"Generate a short, creative description for a song titled '{title.strip()}' "
        f"by the artist '{artist.strip()}'."
    )


def generate_track_description(request: DescriptionRequest) -> str:
    if not request.title.strip() or not request.artist.strip():
        return ""
    if not request.model.strip():
        raise LmStudioError("LM Studio model is not configured.")
    payload: dict[str, object] = {
        "model": request.model,
        "messages": [
            {"role": "system", "content": DESCRIPTION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": build_description_prompt(request.title, request.artist),
            },
        ],
        "temperature": request.temperature,
        "max_tokens": request.max_tokens,
        "stream": False,
    }
    data = _post_chat_completion(
        base_url=request.base_url,
        api_key=request.api_key,
        timeout_seconds=request.timeout_seconds,
        payload=payload,
    )
    return _sanitize_description(_parse_chat_response(data))


class LmStudioDescriptionGenerator:
    """Async adapter that runs the blocking HTTP call off the event loop."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        model: str,
        timeout_seconds: int = 60,
        temperature: float = 0.8,
        max_tokens: int = 120,
        logger=None,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logger

    async def generate(self, title: str, artist: str) -> str:
        if not str(title or "").strip() or not str(artist or "").strip():
            return ""
        request = DescriptionRequest(
            title=title,
            artist=artist,
            base_url=self.base_url,
            api_key=self.api_key,
            model=self.model,
            timeout_seconds=self.timeout_seconds,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        description = await asyncio.to_thread(generate_track_description, request)
        if self.logger is not None:
            self.logger.debug("Generated description for %s - %s: %s", artist, title, description)
        return description
