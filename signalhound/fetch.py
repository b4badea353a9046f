"""Shared request helpers mapping aiohttp failures to pipeline errors."""

import json
from typing import Any

import aiohttp

from signalhound.errors import DecodeError, TransportError


async def fetch_text(session: aiohttp.ClientSession, url: str, what: str) -> str:
    """GET a URL and return its body once fully read."""
    try:
        async with session.get(url) as response:
            text = await response.text()
            if response.status != 200:
                raise TransportError(
                    f"Failed to fetch {what}: {response.status} {text}"
                )
    except aiohttp.ClientError as err:
        raise TransportError(f"Failed to fetch {what}: {err}") from err
    return text


async def fetch_json(session: aiohttp.ClientSession, url: str, what: str) -> Any:
    """GET a URL and decode its body as JSON."""
    text = await fetch_text(session, url, what)
    try:
        return json.loads(text)
    except ValueError as err:
        raise DecodeError(f"Invalid JSON in {what}: {err}") from err
