"""Static catalog of built-in protocol presets.

The table is built on first use and never mutated afterwards, so it can
be read from any thread without locking.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from .field import Representation
from .preset import FieldTemplate, Preset

logger = logging.getLogger(__name__)

TEXT = Representation.TEXT
HEX = Representation.HEX
DECIMAL = Representation.DECIMAL


def _crlf(name: str = "CRLF") -> FieldTemplate:
    return FieldTemplate(name, 2, representation=HEX, value="0D 0A",
                         description="Carriage return + line feed")


def _line(name: str, value: str, description: str = "") -> FieldTemplate:
    # sized to the value so the line boundary survives decoding
    return FieldTemplate(name, len(value), is_variable=True, representation=TEXT,
                         value=value, description=description)


def _build_catalog() -> tuple[Preset, ...]:
    return (
        Preset(
            "modbus_tcp",
            "Modbus TCP",
            "Modbus TCP Read Holding Registers (function 03)",
            (
                FieldTemplate("Transaction ID", 2, value="1",
                              description="Transaction identifier"),
                FieldTemplate("Protocol ID", 2, value="0",
                              description="Protocol identifier (0 = Modbus)"),
                FieldTemplate("Length", 2, value="6",
                              description="Number of following bytes"),
                FieldTemplate("Unit ID", 1, value="1", description="Slave address"),
                FieldTemplate("Function Code", 1, value="3",
                              description="0x03 = Read Holding Registers"),
                FieldTemplate("Start Address", 2, value="0",
                              description="First register address"),
                FieldTemplate("Register Count", 2, value="1",
                              description="Number of registers to read"),
            ),
        ),
        Preset(
            "http_simple",
            "Simple HTTP",
            "Simple HTTP GET request line",
            (
                FieldTemplate("Method", 3, representation=TEXT, value="GET",
                              description="HTTP method"),
                FieldTemplate("Space", 1, representation=HEX, value="20",
                              description="Space character"),
                FieldTemplate("Path", 11, representation=TEXT, value="/index.html",
                              description="Request path"),
                FieldTemplate("Space", 1, representation=HEX, value="20",
                              description="Space character"),
                FieldTemplate("Version", 8, representation=TEXT, value="HTTP/1.1",
                              description="HTTP version"),
                _crlf(),
            ),
        ),
        Preset(
            "custom_header",
            "Custom Header",
            "Custom protocol header with magic number",
            (
                FieldTemplate("Magic Number", 4, representation=HEX,
                              value="AA BB CC DD", description="Protocol magic number"),
                FieldTemplate("Version", 2, representation=HEX, value="01 00",
                              description="Protocol version"),
                FieldTemplate("Message Type", 1, representation=HEX, value="01",
                              description="Message type"),
                FieldTemplate("Sequence", 4, value="1", description="Sequence number"),
                FieldTemplate("Payload Length", 4, value="16",
                              description="Payload length"),
            ),
        ),
        Preset(
            "http_get",
            "HTTP GET",
            "HTTP GET request with Host header",
            (
                FieldTemplate("Method", 3, representation=HEX, value="47 45 54",
                              description="GET"),
                FieldTemplate("Space", 1, representation=HEX, value="20"),
                FieldTemplate("Path", 11, is_variable=True, representation=TEXT,
                              value="/index.html"),
                FieldTemplate("Space", 1, representation=HEX, value="20"),
                FieldTemplate("Version", 8, representation=HEX,
                              value="48 54 54 50 2F 31 2E 31", description="HTTP/1.1"),
                _crlf(),
                FieldTemplate("Host Header", 15, is_variable=True, representation=TEXT,
                              value="Host: localhost"),
                _crlf(),
                _crlf(),
            ),
        ),
        Preset(
            "http_post",
            "HTTP POST",
            "HTTP POST request with Content-Length",
            (
                FieldTemplate("Method", 4, representation=HEX, value="50 4F 53 54",
                              description="POST"),
                FieldTemplate("Space", 1, representation=HEX, value="20"),
                FieldTemplate("Path", 9, is_variable=True, representation=TEXT,
                              value="/api/data"),
                FieldTemplate("Space", 1, representation=HEX, value="20"),
                FieldTemplate("Version", 8, representation=HEX,
                              value="48 54 54 50 2F 31 2E 31", description="HTTP/1.1"),
                _crlf(),
                FieldTemplate("Host Header", 15, is_variable=True, representation=TEXT,
                              value="Host: localhost"),
                _crlf(),
                FieldTemplate("Content-Type", 30, is_variable=True, representation=TEXT,
                              value="Content-Type: application/json"),
                _crlf(),
                FieldTemplate("Content-Length", 18, is_variable=True,
                              representation=TEXT, value="Content-Length: 16"),
                _crlf(),
                _crlf(),
                FieldTemplate("Body", 16, is_variable=True, representation=TEXT,
                              value='{"key": "value"}'),
            ),
        ),
        Preset(
            "ftp_list",
            "FTP LIST",
            "FTP login followed by LIST",
            (
                _line("USER", "USER anonymous\r\n"),
                _line("PASS", "PASS password\r\n"),
                _line("LIST", "LIST\r\n"),
            ),
        ),
        Preset(
            "smtp_send",
            "SMTP Send",
            "SMTP mail sending sequence",
            (
                _line("EHLO", "EHLO localhost\r\n"),
                _line("MAIL FROM", "MAIL FROM:<sender@example.com>\r\n"),
                _line("RCPT TO", "RCPT TO:<receiver@example.com>\r\n"),
                FieldTemplate("DATA", 6, representation=HEX,
                              value="44 41 54 41 0D 0A", description="DATA\\r\\n"),
                _line("Subject", "Subject: Test\r\n"),
                _crlf(),
                _line("Body", "This is a test\r\n"),
                FieldTemplate("End", 5, representation=HEX, value="0D 0A 2E 0D 0A",
                              description="\\r\\n.\\r\\n"),
            ),
        ),
        Preset(
            "websocket_handshake",
            "WebSocket Handshake",
            "WebSocket client opening handshake",
            (
                _line("GET Line", "GET /chat HTTP/1.1\r\n"),
                _line("Host", "Host: localhost:8000\r\n"),
                _line("Upgrade", "Upgrade: websocket\r\n"),
                _line("Connection", "Connection: Upgrade\r\n"),
                _line("Sec-WebSocket-Key",
                      "Sec-WebSocket-Key: dGhlIHNhbXBsZSBub25jZQ==\r\n"),
                _line("Sec-WebSocket-Version", "Sec-WebSocket-Version: 13\r\n"),
                _crlf(),
            ),
        ),
        Preset(
            "redis_set",
            "Redis SET",
            "Redis SET command (RESP)",
            (
                FieldTemplate("Array Marker", 4, representation=TEXT, value="*3\r\n",
                              description="Array of 3 elements"),
                FieldTemplate("Length for SET", 4, representation=TEXT, value="$3\r\n"),
                FieldTemplate("SET", 5, representation=TEXT, value="SET\r\n"),
                FieldTemplate("Length for key", 4, representation=TEXT, value="$3\r\n"),
                FieldTemplate("Key", 5, representation=TEXT, value="key\r\n"),
                FieldTemplate("Length for value", 4, representation=TEXT,
                              value="$5\r\n"),
                FieldTemplate("Value", 7, representation=TEXT, value="value\r\n"),
            ),
        ),
        Preset(
            "telnet_options",
            "Telnet Options",
            "Telnet negotiation (IAC WILL / SB / DO)",
            (
                FieldTemplate("IAC WILL", 3, representation=HEX, value="FF FB 18",
                              description="IAC WILL TERMINAL-TYPE"),
                FieldTemplate("IAC SB", 6, representation=HEX,
                              value="FF FA 18 01 FF F0",
                              description="IAC SB TERMINAL-TYPE SEND IAC SE"),
                FieldTemplate("IAC DO", 3, representation=HEX, value="FF FD 03",
                              description="IAC DO SUPPRESS-GO-AHEAD"),
            ),
        ),
        Preset(
            "dubbo",
            "Dubbo",
            "Dubbo2 protocol frame (16 byte header)",
            (
                FieldTemplate("Magic High", 1, representation=HEX, value="DA"),
                FieldTemplate("Magic Low", 1, representation=HEX, value="BB"),
                FieldTemplate("Flag/Serialization", 1, representation=HEX, value="C2",
                              description="Request, two-way, Hessian2"),
                FieldTemplate("Status", 1, representation=HEX, value="00"),
                FieldTemplate("Request ID", 8, value="1"),
                FieldTemplate("Data Length", 4, value="0"),
            ),
        ),
        Preset(
            "triple",
            "Triple",
            "Triple protocol frame (HTTP/2 based)",
            (
                FieldTemplate("Frame Length", 3, value="0",
                              description="24-bit payload length"),
                FieldTemplate("Frame Type", 1, representation=HEX, value="00",
                              description="DATA = 0"),
                FieldTemplate("Flags", 1, representation=HEX, value="01",
                              description="END_STREAM = 1"),
                FieldTemplate("Stream ID", 4, value="1"),
                FieldTemplate("Payload", is_variable=True, value=""),
            ),
        ),
    )


@lru_cache(maxsize=None)
def load_catalog() -> tuple[Preset, ...]:
    """Return the built-in presets, building the table once."""
    catalog = _build_catalog()
    logger.debug("Loaded %d protocol presets", len(catalog))
    return catalog


def get_preset(preset_id: str) -> Preset | None:
    """Look up a preset by id."""
    for preset in load_catalog():
        if preset.id == preset_id:
            return preset
    return None
