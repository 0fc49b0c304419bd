"""WhatsApp transport backed by the Node.js bridge websocket protocol."""

from __future__ import annotations

import asyncio
import contextlib
import json
import random
import uuid
from typing import TYPE_CHECKING, Any

import websockets
from loguru import logger
from websockets.exceptions import WebSocketException

from chatwarden.config.schema import WhatsAppConfig
from chatwarden.core.errors import TransportError
from chatwarden.core.models import InboundEvent, Participant

if TYPE_CHECKING:
    from chatwarden.app.bootstrap import BotService

PROTOCOL_VERSION = 2


class BridgeProtocolError(RuntimeError):
    """Bridge returned a protocol-level error."""

    def __init__(self, code: str, message: str, retryable: bool):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.retryable = retryable


def parse_inbound_message(payload: dict[str, Any]) -> InboundEvent | None:
    """Build an ``InboundEvent`` from a bridge ``message`` payload."""
    message_id = str(payload.get("messageId") or "").strip()
    chat_jid = str(payload.get("chatJid") or "").strip()
    sender_id = str(payload.get("senderId") or payload.get("participantJid") or "").strip()
    text = str(payload.get("text") or "")

    if not chat_jid or not sender_id or not text.strip():
        logger.warning("Dropping malformed inbound message event")
        return None

    is_group = bool(payload.get("isGroup", chat_jid.endswith("@g.us")))
    return InboundEvent(
        chat_id=chat_jid,
        sender_id=sender_id,
        content=text,
        group_id=chat_jid if is_group else None,
        message_id=message_id or None,
        is_from_self=bool(payload.get("fromMe", False)),
        raw_metadata={"participant_jid": payload.get("participantJid")},
    )


def parse_participants(result: dict[str, Any]) -> list[Participant]:
    raw = result.get("participants")
    if not isinstance(raw, list):
        return []
    participants: list[Participant] = []
    for item in raw:
        if isinstance(item, str):
            participants.append(Participant(id=item))
        elif isinstance(item, dict) and item.get("id"):
            participants.append(
                Participant(
                    id=str(item["id"]),
                    is_admin=bool(item.get("isAdmin", False)),
                    is_super_admin=bool(item.get("isSuperAdmin", False)),
                )
            )
    return participants


class WhatsAppChannel:
    """Transport port implementation over the bridge protocol v2.

    Commands are JSON envelopes carrying a ``requestId``; the bridge answers
    with a ``response`` frame that resolves the pending future.
    """

    name = "whatsapp"

    def __init__(self, config: WhatsAppConfig, service: "BotService"):
        self.config = config
        self._service = service
        self._ws: Any | None = None
        self._running = False
        self._connected = False
        self._reader_task: asyncio.Task[None] | None = None
        self._send_lock = asyncio.Lock()
        self._pending: dict[str, asyncio.Future[dict[str, Any]]] = {}
        self._inbound_tasks: set[asyncio.Task[Any]] = set()
        self._reconnect_attempts = 0

    @property
    def connected(self) -> bool:
        return self._connected

    def _require_token(self) -> str:
        token = (self.config.bridge_token or "").strip()
        if not token:
            raise RuntimeError("channels.whatsapp.bridgeToken is required for protocol v2")
        return token

    @property
    def _request_timeout(self) -> float:
        return max(1.0, self.config.request_timeout_ms / 1000.0)

    # ── lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        """Connect to the bridge and serve until stopped."""
        bridge_url = self.config.resolved_bridge_url
        token = self._require_token()
        startup_timeout_s = max(1.0, self.config.startup_timeout_ms / 1000.0)
        logger.info("Connecting to WhatsApp bridge at {}...", bridge_url)

        self._running = True
        while self._running:
            try:
                async with websockets.connect(
                    bridge_url,
                    max_size=self.config.max_payload_bytes,
                    ping_interval=20,
                    ping_timeout=20,
                ) as ws:
                    self._ws = ws
                    self._reader_task = asyncio.create_task(self._read_loop())
                    await self._verify_bridge_health(token, timeout_seconds=startup_timeout_s)

                    self._connected = True
                    self._reconnect_attempts = 0
                    self._service.set_connection_status("ready")
                    logger.info("Connected to WhatsApp bridge (protocol v{})", PROTOCOL_VERSION)
                    await self._reader_task
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.warning("WhatsApp bridge connection error: {}", e)
                if not self._running:
                    break

                self._reconnect_attempts += 1
                if self.config.reconnect_max_attempts > 0 and (
                    self._reconnect_attempts >= self.config.reconnect_max_attempts
                ):
                    logger.error(
                        "WhatsApp reconnect attempts exhausted ({}/{})",
                        self._reconnect_attempts,
                        self.config.reconnect_max_attempts,
                    )
                    self._running = False
                    break

                delay = self._compute_backoff_ms(self._reconnect_attempts) / 1000.0
                logger.info("Reconnecting in {:.2f}s...", delay)
                await asyncio.sleep(delay)
            finally:
                self._connected = False
                self._ws = None
                self._service.set_connection_status("disconnected")
                if self._reader_task:
                    self._reader_task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await self._reader_task
                    self._reader_task = None
                self._fail_pending("Bridge connection closed")

    async def stop(self) -> None:
        self._running = False
        self._connected = False

        for task in list(self._inbound_tasks):
            task.cancel()
        self._inbound_tasks.clear()

        if self._reader_task:
            self._reader_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._reader_task
            self._reader_task = None

        if self._ws:
            await self._ws.close()
            self._ws = None
        self._fail_pending("Channel stopped")

    # ── transport port ───────────────────────────────────────────────

    async def reply(self, message: InboundEvent, text: str) -> None:
        await self._command(
            "reply",
            "send_text",
            {"to": message.chat_id, "text": text, "replyToMessageId": message.message_id},
        )

    async def delete(self, message: InboundEvent) -> None:
        if not message.message_id:
            raise TransportError("delete", "message has no id")
        await self._command(
            "delete",
            "delete_message",
            {
                "chatJid": message.chat_id,
                "messageId": message.message_id,
                "participantJid": message.raw_metadata.get("participant_jid") or message.sender_id,
                "forEveryone": True,
            },
        )

    async def get_participants(self, group_id: str) -> list[Participant]:
        result = await self._command("get_participants", "group_participants", {"groupJid": group_id})
        return parse_participants(result)

    async def remove_participants(self, group_id: str, ids: list[str]) -> None:
        await self._update_participants(group_id, ids, "remove")

    async def promote_participants(self, group_id: str, ids: list[str]) -> None:
        await self._update_participants(group_id, ids, "promote")

    async def demote_participants(self, group_id: str, ids: list[str]) -> None:
        await self._update_participants(group_id, ids, "demote")

    async def send(self, target_id: str, text: str) -> None:
        await self._command("send", "send_text", {"to": target_id, "text": text})

    async def _update_participants(self, group_id: str, ids: list[str], action: str) -> None:
        await self._command(
            action,
            "group_update_participants",
            {"groupJid": group_id, "participants": list(ids), "action": action},
        )

    async def _command(self, operation: str, command_type: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self._connected:
            raise TransportError(operation, "WhatsApp bridge not connected", retryable=True)
        try:
            return await self._send_command(command_type, payload, timeout_seconds=self._request_timeout)
        except BridgeProtocolError as e:
            raise TransportError(operation, str(e), retryable=e.retryable) from e
        except TimeoutError as e:
            raise TransportError(operation, "bridge request timed out", retryable=True) from e
        except (RuntimeError, OSError, WebSocketException) as e:
            raise TransportError(operation, str(e), retryable=True) from e

    # ── protocol ─────────────────────────────────────────────────────

    async def _verify_bridge_health(self, token: str, timeout_seconds: float) -> None:
        response = await self._send_command("health", {}, timeout_seconds=timeout_seconds, token=token)
        version = response.get("protocolVersion", response.get("version"))
        if version != PROTOCOL_VERSION:
            raise RuntimeError(f"Bridge protocol mismatch: expected v{PROTOCOL_VERSION}, got {version!r}")

    async def _read_loop(self) -> None:
        if not self._ws:
            return
        async for raw in self._ws:
            await self._handle_bridge_message(raw)

    async def _handle_bridge_message(self, raw: str | bytes) -> None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Invalid JSON from bridge")
            return
        if not isinstance(data, dict):
            logger.warning("Invalid bridge frame shape")
            return

        version = data.get("version")
        if version != PROTOCOL_VERSION:
            logger.warning("Unexpected bridge protocol version: {!r}", version)
            return

        msg_type = data.get("type")
        payload = data.get("payload")
        if not isinstance(payload, dict):
            payload = {}

        if msg_type == "response":
            request_id = data.get("requestId")
            if isinstance(request_id, str):
                self._resolve_pending(request_id, payload)
            return

        if msg_type == "message":
            event = parse_inbound_message(payload)
            if event is not None:
                # Keep the reader free so command responses are consumed while handlers run.
                self._spawn(self._service.process(event))
            return

        if msg_type == "group_participants":
            self._handle_membership(payload)
            return

        if msg_type == "status":
            status = str(payload.get("status") or "unknown")
            logger.info("WhatsApp status: {}", status)
            self._service.set_connection_status(status)
            return

        if msg_type == "qr":
            logger.info("Scan QR code in bridge logs or login flow")
            self._service.set_connection_status("qr")
            return

        if msg_type == "error":
            logger.error("WhatsApp bridge error: {}", payload.get("error"))

    def _handle_membership(self, payload: dict[str, Any]) -> None:
        group_id = str(payload.get("groupJid") or "").strip()
        action = str(payload.get("action") or "").strip().lower()
        if not group_id or action not in {"add", "remove"}:
            return
        participants = payload.get("participants")
        if not isinstance(participants, list):
            return
        for user_id in participants:
            if isinstance(user_id, str) and user_id:
                self._spawn(self._service.handle_membership_event(group_id, user_id, action == "add"))

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._inbound_tasks.add(task)
        task.add_done_callback(self._on_inbound_task_done)

    def _on_inbound_task_done(self, task: asyncio.Task[Any]) -> None:
        self._inbound_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("WhatsApp inbound task failed: {}", exc)

    async def _send_command(
        self,
        command_type: str,
        payload: dict[str, Any],
        timeout_seconds: float,
        token: str | None = None,
    ) -> dict[str, Any]:
        if not self._ws:
            raise RuntimeError("Bridge websocket not connected")

        request_id = uuid.uuid4().hex
        future: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future

        envelope = {
            "version": PROTOCOL_VERSION,
            "type": command_type,
            "token": token or self._require_token(),
            "requestId": request_id,
            "payload": payload,
        }
        try:
            async with self._send_lock:
                await self._ws.send(json.dumps(envelope))
            return await asyncio.wait_for(future, timeout=timeout_seconds)
        finally:
            self._pending.pop(request_id, None)

    def _resolve_pending(self, request_id: str, payload: dict[str, Any]) -> None:
        future = self._pending.get(request_id)
        if not future or future.done():
            return

        if bool(payload.get("ok")):
            result = payload.get("result")
            future.set_result(result if isinstance(result, dict) else {})
            return

        error = payload.get("error") if isinstance(payload.get("error"), dict) else {}
        code = str(error.get("code") or "ERR_INTERNAL")
        message = str(error.get("message") or "Bridge command failed")
        future.set_exception(BridgeProtocolError(code, message, bool(error.get("retryable", False))))

    def _fail_pending(self, reason: str) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(RuntimeError(reason))
        self._pending.clear()

    def _compute_backoff_ms(self, attempt: int) -> int:
        initial = max(100, self.config.reconnect_initial_ms)
        factor = max(1.1, self.config.reconnect_factor)
        raw = initial * (factor ** max(0, attempt - 1))
        capped = min(float(self.config.reconnect_max_ms), raw)
        jitter = capped * max(0.0, min(1.0, self.config.reconnect_jitter))
        return int(random.uniform(max(100.0, capped - jitter), capped + jitter))
