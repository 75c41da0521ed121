from __future__ import annotations

import asyncio
import contextlib
import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .errors.handlers import envelope_response

logger = logging.getLogger(__name__)


class HandlerTimeoutMiddleware:
    """
    Caps how long a handler may work without progress. If exceeded, returns a
    504 envelope.

    Every request body chunk pushes the deadline out again, so a slow but
    steady upload is not cut off (stalled bodies are BodyReadTimeoutMiddleware's
    job). Once the response has started the clock stops and a streaming
    download runs to completion. Cancelling the handler also cancels any
    in-flight upload write, which discards its partial file.
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float = 15.0) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds
        response_started = False

        async def _receive() -> Message:
            nonlocal deadline
            message = await receive()
            if message["type"] == "http.request":
                deadline = loop.time() + self.timeout_seconds
            return message

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        task = asyncio.ensure_future(self.app(scope, _receive, _send))
        try:
            while not task.done() and not response_started:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                await asyncio.wait({task}, timeout=remaining)
            if task.done() or response_started:
                await task
                return
        except asyncio.CancelledError:
            task.cancel()
            raise

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.warning("Handler timeout after %ss on %s", self.timeout_seconds, scope.get("path"))
        resp = envelope_response(504, "The request took too long to complete.")
        await resp(scope, receive, send)


class BodyReadTimeoutMiddleware:
    """
    Enforces a timeout on each read of the request body to mitigate slowloris.
    If the body stalls, returns a 408 envelope.
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float = 30.0) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        timed_out = False

        async def _timeout_receive() -> Message:
            nonlocal timed_out
            try:
                return await asyncio.wait_for(receive(), timeout=self.timeout_seconds)
            except asyncio.TimeoutError:
                timed_out = True
                raise

        async def _send(message: Message) -> None:
            # the framework may turn the read failure into its own error response; drop it
            if not timed_out:
                await send(message)

        try:
            await self.app(scope, _timeout_receive, _send)
        except asyncio.TimeoutError:
            if not timed_out:
                raise

        if timed_out:
            logger.warning("Body read timeout on %s", scope.get("path"))
            resp = envelope_response(408, "Timed out while reading request body.")
            await resp(scope, receive, send)
