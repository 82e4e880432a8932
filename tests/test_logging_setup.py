from __future__ import annotations

import logging

from wallet_parser.logging_setup import (
    RowFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("wallet_parser.x", logging.DEBUG, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_row_formatter_prefixes_row_position():
    fmt = RowFormatter("%(levelname)s %(message)s")
    assert fmt.format(_record("dropped: 5 field(s)", row=3)) == "row 3: DEBUG dropped: 5 field(s)"
    assert fmt.format(_record("plain")) == "DEBUG plain"


def test_configure_logging_can_be_called_again(capsys):
    pkg = logging.getLogger("wallet_parser")

    configure_logging("WARNING")
    configure_logging("debug")

    console = [h for h in pkg.handlers if h.get_name() == "wallet_parser.console"]
    assert len(console) == 1
    assert pkg.level == logging.DEBUG
    assert pkg.propagate is False

    get_logger("wallet_parser.normalizers").debug("dropped: x", extra={"row": 7})
    assert "row 7: DEBUG wallet_parser.normalizers: dropped: x" in capsys.readouterr().err


def test_level_falls_back_to_environment_then_info(monkeypatch):
    pkg = logging.getLogger("wallet_parser")

    monkeypatch.setenv("WALLET_PARSER_LOG_LEVEL", "error")
    configure_logging()
    assert pkg.level == logging.ERROR

    monkeypatch.delenv("WALLET_PARSER_LOG_LEVEL")
    configure_logging()
    assert pkg.level == logging.INFO

    configure_logging("not-a-level")
    assert pkg.level == logging.INFO


def test_reset_logging_restores_propagation():
    pkg = logging.getLogger("wallet_parser")
    configure_logging("INFO")

    reset_logging()

    assert pkg.propagate is True
    assert not any(h.get_name() == "wallet_parser.console" for h in pkg.handlers)
