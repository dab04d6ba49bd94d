"""Tests for :mod:`travel_accounts.app_logging`."""

import io
import json
import logging

from travel_accounts.app_logging import setup_logger


def test_json_records():
    stream = io.StringIO()
    root = logging.getLogger()
    handler = setup_logger(logging.INFO, stream=stream)
    handler.setStream(stream)
    try:
        assert setup_logger(logging.INFO) is handler, 'installed only once'
        logging.getLogger('travel_accounts.test').info('Deleted %s', 'u1')

        record = json.loads(stream.getvalue().splitlines()[-1])
        assert record['message'] == 'Deleted u1'
        assert record['level'] == 'INFO'
        assert record['name'] == 'travel_accounts.test'
        assert 'timestamp' in record
    finally:
        root.removeHandler(handler)
