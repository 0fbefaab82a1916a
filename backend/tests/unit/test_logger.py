"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from authserver.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG


def test_json_formatter_includes_token_context() -> None:
    """Known ``extra`` keys are copied onto the JSON payload."""

    record = logging.LogRecord("authserver", logging.INFO, __file__, 1, "token.minted", None, None)
    record.binding = "clientId:simple"
    record.grant_type = "password"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "token.minted"
    assert payload["binding"] == "clientId:simple"
    assert payload["grant_type"] == "password"
    assert "authority" not in payload
