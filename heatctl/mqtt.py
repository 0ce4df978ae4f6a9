"""
MQTT source of threshold updates, requires the paho-mqtt package.

Usage:
    source = MqttThresholdSource(control, 'broker.local')
    await heatctl.run(control, source.serve())

Connection management, reconnection and QoS are left to paho.
The topic is (re)subscribed on every successful connection.
"""

from __future__ import annotations

import asyncio
from typing import Any, NoReturn, Optional

import paho.mqtt.client as mqtt

from .component import Component
from .loop import ControlLoop

__all__ = ['MqttThresholdSource']


class MqttThresholdSource(Component):
    """
    Feed messages from the configured topic to control.on_message().

    paho runs its network loop in a separate thread, the
    messages are handled in that thread.
    """

    def __init__(
            self,
            control: ControlLoop,
            host: str,
            port: int = 1883,
            *,
            keepalive: int = 60,
            qos: int = 1,
            client: Optional[mqtt.Client] = None,
            **kwargs) -> None:
        super().__init__(**kwargs)
        self._control = control
        self._host = host
        self._port = port
        self._keepalive = keepalive
        self._qos = qos
        if client is None:
            client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
        self.client = client
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message

    @property
    def topic(self) -> str:
        return self._control.config.topic

    def _on_connect(self, client, _userdata, _flags, reason_code, _properties=None) -> None:
        if reason_code.is_failure:
            self.log_warning("connection to %s:%d refused: %s", self._host, self._port, reason_code)
            return
        self.log_info("connected to %s:%d, subscribing to %r", self._host, self._port, self.topic)
        client.subscribe(self.topic, qos=self._qos)

    def _on_disconnect(
            self, _client, _userdata, _flags, reason_code, _properties=None) -> None:
        self.log_warning("disconnected: %s", reason_code)

    def _on_message(self, _client, _userdata, msg: Any) -> None:
        if msg.topic != self.topic:
            self.log_debug("ignoring message on %r", msg.topic)
            return
        self._control.on_message(msg.topic, msg.payload)

    def start(self) -> None:
        """Connect asynchronously and start the network thread."""
        self.client.connect_async(self._host, self._port, keepalive=self._keepalive)
        self.client.loop_start()

    def stop(self) -> None:
        """Disconnect and stop the network thread."""
        self.client.disconnect()
        self.client.loop_stop()

    async def serve(self) -> NoReturn:
        """Run until cancelled. Suitable as a supporting coroutine for run()."""
        self.start()
        try:
            while True:
                await asyncio.sleep(3600)
        finally:
            self.stop()
