"""Module for initializing settings related to the registry logger
Functions:
-get_logger"""

import logging, coloredlogs
import os

VALID_LVLS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
_LOG_LVL = os.getenv('LOG_LEVEL', None)
if _LOG_LVL:
    if _LOG_LVL.lstrip('-').isdigit():
        _LOG_LVL = int(_LOG_LVL)
    else:
        assert _LOG_LVL in VALID_LVLS, "Log level {} not in valid levels {}".format(_LOG_LVL, VALID_LVLS)
        _LOG_LVL = getattr(logging, _LOG_LVL)
else:
    _LOG_LVL = logging.INFO


format = '%(asctime)s.%(msecs)03d %(name)s[%(process)d] <{}> %(levelname)-2s %(message)s'.format(
    os.getenv('HOST_NAME', 'Registry'))

"""
Custom Styling
"""

coloredlogs.DEFAULT_LEVEL_STYLES = {
    'critical': {'color': 'white', 'bold': True, 'background': 'red'},
    'error': {'color': 'red'},
    'warning': {'color': 'yellow'},
    'info': {'color': 'white'},
    'debug': {'color': 'green'},
}
coloredlogs.DEFAULT_FIELD_STYLES = {
    'asctime': {'color': 'green'},
    'hostname': {'color': 'magenta'},
    'levelname': {'color': 'black', 'bright': True},
    'name': {'color': 'blue'},
    'programname': {'color': 'cyan'}
}


class ColoredFileHandler(logging.FileHandler):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setFormatter(
            coloredlogs.ColoredFormatter(format)
        )


class ColoredStreamHandler(logging.StreamHandler):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setFormatter(
            coloredlogs.ColoredFormatter(format)
        )


def _ignore(*args, **kwargs):
    pass


class MockLogger:
    def __getattr__(self, item):
        return _ignore


def _handlers():
    handlers = [ColoredStreamHandler()]

    filename = os.getenv('LOG_FILE')
    if filename:
        filedir = os.path.dirname(filename)
        if filedir:
            os.makedirs(filedir, exist_ok=True)
        handlers.append(ColoredFileHandler(filename, delay=True))

    return handlers


def get_logger(name=''):
    if _LOG_LVL < 0:
        return MockLogger()

    log = logging.getLogger(name)

    if not log.handlers:
        for handler in _handlers():
            log.addHandler(handler)
        log.propagate = False

    log.setLevel(_LOG_LVL)

    return log
