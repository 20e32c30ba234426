"""
Export Sinks
============

Bounded Context: Delivery of exported documents

The serializer produces a value; a sink decides where it goes.

Design:
- ExportSink protocol: deliver(document, filename)
- FileExportSink: writes <directory>/<filename>
- MqttExportSink: publishes {filename, document} as JSON to a topic
  (QoS configurable, connection synchronized with threading.Event)
"""

import threading
from pathlib import Path
from typing import Any, Optional, Protocol

import geojson
import paho.mqtt.client as mqtt
from geojson import FeatureCollection

from dredge_zone.export.serializer import ExportSerializer
from dredge_zone.logging import LogEvent, StructuredLogger, create_logger


class ExportSink(Protocol):
    """Protocol for export sinks (interface)."""

    def deliver(self, document: FeatureCollection, filename: str) -> Any:
        """Deliver an export document under a suggested filename."""
        ...


class FileExportSink:
    """Writes export documents to a directory."""

    def __init__(self, directory: Path, logger: Optional[StructuredLogger] = None):
        """
        Args:
            directory: Target directory (created on first delivery)
            logger: Structured logger (default: component "export")
        """
        self.directory = Path(directory)
        self.logger = logger or create_logger("export")

    def deliver(self, document: FeatureCollection, filename: str) -> Path:
        """
        Write the document as indented JSON.

        Returns:
            Path of the written file
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename
        path.write_text(ExportSerializer.dumps(document, indent=2), encoding="utf-8")

        self.logger.info(
            event=LogEvent.EXPORT_DELIVERED,
            message="Export written to file",
            metadata={'path': str(path), 'feature_count': len(document['features'])}
        )
        return path


class MqttExportSink:
    """
    Publishes export documents to an MQTT topic.

    Attributes:
        broker_host: MQTT broker hostname
        broker_port: MQTT broker port
        topic: Topic the documents are published to
        qos: Quality of Service for export messages

    Thread Safety:
        Thread-safe via paho-mqtt's loop_start() and threading.Event
    """

    def __init__(
        self,
        broker_host: str,
        topic: str,
        broker_port: int = 1883,
        client_id: str = "dredge_zone_export",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            qos: Quality of Service (default 1, at-least-once)
            logger: Structured logger (default: component "export")
        """
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.topic = topic
        self.client_id = client_id
        self.qos = qos
        self.logger = logger or create_logger("export")

        self.client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            protocol=mqtt.MQTTv311,
        )
        if username and password:
            self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        self._connected = threading.Event()

    @property
    def broker(self) -> str:
        """host:port of the broker."""
        return f"{self.broker_host}:{self.broker_port}"

    def _on_connect(self, client, userdata, flags, reason_code, properties=None) -> None:
        """Callback when connection established."""
        if not reason_code.is_failure:
            self._connected.set()
            self.logger.info(
                event=LogEvent.MQTT_CONNECTED,
                message="Connected to MQTT broker",
                metadata={
                    'broker': self.broker,
                    'client_id': self.client_id,
                    'topic': self.topic
                }
            )
        else:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message=f"Failed to connect to broker (rc={reason_code})",
                metadata={'broker': self.broker}
            )

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None) -> None:
        """Callback when disconnected from broker."""
        self._connected.clear()
        self.logger.warning(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Disconnected from MQTT broker",
            metadata={
                'broker': self.broker,
                'reason_code': str(reason_code)
            }
        )

    def connect(self, timeout: float = 10.0) -> bool:
        """
        Connect to MQTT broker.

        Returns:
            True if connected within the timeout, False otherwise
        """
        try:
            self.client.connect(self.broker_host, self.broker_port)
        except OSError as e:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Failed to connect to broker",
                exc_info=e,
                metadata={'broker': self.broker}
            )
            return False

        self.client.loop_start()
        if self._connected.wait(timeout=timeout):
            return True

        self.logger.error(
            event=LogEvent.MQTT_CONNECTION_ERROR,
            message="Connection timeout",
            metadata={'timeout': timeout}
        )
        return False

    def disconnect(self) -> None:
        """Stop the network loop and disconnect."""
        self.client.loop_stop()
        self.client.disconnect()

    def is_connected(self) -> bool:
        """Check if currently connected to broker."""
        return self._connected.is_set()

    def deliver(self, document: FeatureCollection, filename: str) -> bool:
        """
        Publish {filename, document} to the export topic.

        Returns:
            True if the broker accepted the message, False otherwise
        """
        if not self._connected.is_set():
            self.logger.warning(
                event=LogEvent.EXPORT_ERROR,
                message="Cannot publish export: not connected to broker",
                metadata={'topic': self.topic}
            )
            return False

        payload = geojson.dumps({'filename': filename, 'document': document})
        result = self.client.publish(
            topic=self.topic,
            payload=payload,
            qos=self.qos,
        )

        if result.rc != mqtt.MQTT_ERR_SUCCESS:
            self.logger.warning(
                event=LogEvent.EXPORT_ERROR,
                message=f"Publish failed (rc={result.rc})",
                metadata={'topic': self.topic}
            )
            return False

        self.logger.info(
            event=LogEvent.EXPORT_DELIVERED,
            message="Export published",
            metadata={'topic': self.topic, 'filename': filename, 'bytes': len(payload)}
        )
        return True
