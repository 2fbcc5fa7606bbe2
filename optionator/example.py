# optionator/example.py
"""
optionator.example
------------------

Example records used by ``optionator demo``: an HTTP-style server
configuration with a nested listener section and an opaque TLS context that
optionator leaves alone.
"""

import ssl
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from .numeric import Uint16


@dataclass
class NestedConfig:
    port: Uint16 = field(default=Uint16(0), metadata={"default": "8080", "required": "true"})
    host: str = field(default="", metadata={"default": "localhost", "required": "true"})


@dataclass
class Server:
    """Server settings; every field but the TLS context has a default."""

    address: str = field(default="", metadata={"default": "0.0.0.0", "required": "true"})
    timeout: timedelta = field(default=timedelta(0), metadata={"default": "30s"})
    max_conns: int = field(default=0, metadata={"default": "100"})
    tls_config: Optional[ssl.SSLContext] = None  # no default provided
    nested: Optional[NestedConfig] = None
