"""Bound gateway calls so a hung request cannot hold a workflow busy forever."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from flipart.services.gateway.openai_gateway import GatewayError

T = TypeVar("T")

TIMEOUT_MESSAGE = "Request timed out"


async def bounded_call(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """Await `awaitable`, raising GatewayError after `timeout` seconds.

    A `timeout` of None waits indefinitely.
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        raise GatewayError(TIMEOUT_MESSAGE) from None
