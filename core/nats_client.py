"""
NATS JetStream Client for Python Microservices

Thin event bus over nats-py. Events are JSON encoded and published to
JetStream when a stream covers the subject, otherwise to core NATS.
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import nats
from nats.aio.client import Client as NATS
from nats.js import JetStreamContext

from core.config.infra_config import InfraConfig

logger = logging.getLogger(__name__)


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal, date and Enum types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def subject_matches(pattern: str, subject: str) -> bool:
    """NATS subject matching: `*` matches one token, a trailing `>` one or more"""
    pattern_tokens = pattern.split(".")
    subject_tokens = subject.split(".")
    for i, token in enumerate(pattern_tokens):
        if token == ">":
            return len(subject_tokens) > i
        if i >= len(subject_tokens):
            return False
        if token != "*" and token != subject_tokens[i]:
            return False
    return len(pattern_tokens) == len(subject_tokens)


class NATSEventBus:
    """
    NATS event bus using nats-py.

    True async I/O - no thread pool overhead.
    """

    def __init__(
        self,
        service_name: str,
        config: Optional[InfraConfig] = None,
    ):
        """
        Initialize NATS Event Bus.

        Args:
            service_name: Name of the service (used as connection name)
            config: Optional InfraConfig, defaults to environment
        """
        self.service_name = service_name
        self.config = config or InfraConfig.from_env()
        self.servers = self.config.nats_servers

        self._nc: Optional[NATS] = None
        self._js: Optional[JetStreamContext] = None
        self._stream_subjects: List[str] = []

        logger.info(f"NATS EventBus initialized: {self.servers}")

    async def connect(self):
        """Connect to NATS"""
        try:
            self._nc = await nats.connect(
                servers=[self.servers],
                name=self.service_name,
            )
            self._js = self._nc.jetstream()
            logger.info(f"Connected to NATS as {self.service_name}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise

    async def ensure_stream(self, name: str, subjects: List[str], max_msgs: int = 100000):
        """Create a JetStream stream if it does not exist (idempotent)"""
        if not self._js:
            raise RuntimeError("Not connected to NATS")
        try:
            await self._js.add_stream(name=name, subjects=subjects, max_msgs=max_msgs)
        except Exception as e:
            logger.debug(f"Stream creation note for {name}: {e}")
        self._stream_subjects.extend(subjects)

    def _covered_by_stream(self, subject: str) -> bool:
        return any(subject_matches(pattern, subject) for pattern in self._stream_subjects)

    async def publish(self, subject: str, data: Dict[str, Any]) -> bool:
        """Publish a JSON payload on a subject"""
        if not self.is_connected:
            logger.error("Not connected to NATS")
            return False

        payload = json.dumps(data, cls=DecimalEncoder).encode()
        if self._js and self._covered_by_stream(subject):
            ack = await self._js.publish(subject, payload)
            logger.debug(f"Published {subject} to stream {ack.stream}, seq={ack.seq}")
        else:
            await self._nc.publish(subject, payload)
            logger.debug(f"Published {subject}")
        return True

    async def close(self):
        """Drain and close the NATS connection"""
        if self._nc:
            await self._nc.drain()
            self._nc = None
            self._js = None
        logger.info("Disconnected from NATS")

    @property
    def is_connected(self) -> bool:
        """Check if connected to NATS"""
        return self._nc is not None and self._nc.is_connected


__all__ = ["DecimalEncoder", "NATSEventBus", "subject_matches"]
