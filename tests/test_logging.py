import json
import logging

import pytest

from qobuz_api.core.logging_util import PACKAGE_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    yield
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.mark.parametrize(
    "verbose, quiet, level",
    [
        (None, None, logging.INFO),
        (True, None, logging.DEBUG),
        (None, True, logging.WARNING),
        (True, True, logging.WARNING),
    ],
)
def test_levels(verbose, quiet, level):
    assert setup_logging(verbose=verbose, quiet=quiet).level == level


def test_repeated_setup_keeps_one_handler():
    setup_logging()
    logger = setup_logging(json_logs=True)
    assert len(logger.handlers) == 1


def test_json_lines_carry_extra_context(capsys):
    setup_logging(json_logs=True)
    logging.getLogger("qobuz_api.api.client").info(
        "qobuz.download_track.start", extra={"track_id": "42", "format_id": "27"}
    )

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "qobuz.download_track.start"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "qobuz_api.api.client"
    assert payload["track_id"] == "42"
    assert payload["format_id"] == "27"
