"""Signal K bus adapter over MQTT.

Signal K servers with the MQTT interface enabled mirror self-vessel
values on topics such as ``vessels/self/navigation/position``. This
runtime subscribes to the navigation subtree and publishes forecast
deltas back as JSON.
"""

from __future__ import annotations

import asyncio
import json
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from signalk_openmeteo._constants import PLUGIN_ID
from signalk_openmeteo.config import ForecastConfig
from signalk_openmeteo.exceptions import SignalKBusError
from signalk_openmeteo.ingestion.navigation import update_from_mqtt
from signalk_openmeteo.state.events import NavigationUpdate

NAVIGATION_TOPIC = "vessels/self/navigation/#"


@dataclass(frozen=True)
class MqttSettings:
    """Broker connection details for the Signal K server."""

    host: str
    port: int
    client_id: str
    username: str | None = None
    password: str | None = None
    subscribe_navigation: bool = True
    delta_topic: str = "signalk/delta"

    @classmethod
    def from_config(cls, config: ForecastConfig) -> MqttSettings:
        return cls(
            host=config.mqtt_host,
            port=config.mqtt_port,
            client_id=f"{PLUGIN_ID}-{secrets.token_hex(4)}",
            username=config.mqtt_username,
            password=config.mqtt_password,
            subscribe_navigation=config.enable_position_subscription,
            delta_topic=config.delta_topic,
        )


class SignalKMqttRuntime:
    """Threaded paho-mqtt runtime that emits navigation updates onto an asyncio loop."""

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_update: Callable[[NavigationUpdate], None],
        keepalive: int = 60,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_update = on_update
        self._keepalive = keepalive
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._settings: MqttSettings | None = None

    @property
    def is_running(self) -> bool:
        """Whether the bus connection is up."""
        return self._running

    def start(self, settings: MqttSettings) -> None:
        """Connect and, when enabled, subscribe to navigation values."""
        self.stop()
        self._logger.debug(
            "MQTT runtime start requested host=%s port=%s client_id=%s",
            settings.host,
            settings.port,
            settings.client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=settings.client_id,
        )
        client.enable_logger(self._logger)
        if settings.username:
            client.username_pw_set(settings.username, settings.password)

        self._settings = settings

        def on_connect(
            client: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("Signal K broker refused connection: %s", reason_code)
                return
            self._logger.debug("Connected to Signal K broker (%s)", reason_code)
            if self._settings is not None and self._settings.subscribe_navigation:
                self._logger.debug("MQTT subscribing topic=%s", NAVIGATION_TOPIC)
                client.subscribe(NAVIGATION_TOPIC, qos=0)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            try:
                update = update_from_mqtt(msg.topic, msg.payload)
                if update is None:
                    return
                self._loop.call_soon_threadsafe(self._on_update, update)
            except Exception:
                self._logger.debug("Unreadable navigation message on %s", msg.topic, exc_info=True)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("Signal K broker connection lost: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        client.connect(settings.host, settings.port, keepalive=self._keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("Signal K bus loop started")

    def publish_delta(self, delta: dict[str, Any]) -> None:
        """Publish one Signal K delta as JSON to the delta topic."""
        client = self._client
        if client is None or not self._running or self._settings is None:
            raise SignalKBusError("MQTT runtime is not running")
        client.publish(self._settings.delta_topic, json.dumps(delta, separators=(",", ":")), qos=0)

    def stop(self) -> None:
        """Disconnect from the broker; safe to call when not started."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._settings = None

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("Disconnecting from Signal K broker")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("Signal K bus loop stopped")
