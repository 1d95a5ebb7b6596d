# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Global configuration. Options are passed as a plain dict, in the same
# way as the options of the struct utilities:
#
#   config({'locale': 'de', 'maxdepth': 64})
#
# - locale: name of an installed locale used to render messages.
# - customerror: error map applied before the locale (string, callable,
#   or dict of issue code to template).
# - maxdepth: bound on nested schema frames per parse call.
# - reportinput: keep the offending input on finalized issues.


from typing import *
import logging
import threading

from .util import getprop


logger = logging.getLogger(__name__)

DEFAULT_MAXDEPTH = 256

_DEFAULTS = {
    'locale': 'en',
    'customerror': None,
    'maxdepth': DEFAULT_MAXDEPTH,
    'reportinput': False,
}

_lock = threading.Lock()
_config: Dict[str, Any] = dict(_DEFAULTS)


def config(opts: Dict[str, Any] = None) -> Dict[str, Any]:
    """
    Update the global configuration with the given options, and return a
    copy of the resulting configuration. Unknown option names are rejected.
    """
    if opts:
        unknown = [k for k in opts if k not in _DEFAULTS]
        if unknown:
            raise ValueError('Unknown config options: ' + ', '.join(unknown))

        locale = getprop(opts, 'locale')
        if locale is not None:
            # Late import, locales depend on issues which read the config.
            from .locales import getlocale
            getlocale(locale)

        maxdepth = getprop(opts, 'maxdepth')
        if maxdepth is not None and (not isinstance(maxdepth, int) or maxdepth < 1):
            raise ValueError('Config maxdepth must be a positive integer: ' + repr(maxdepth))

        with _lock:
            _config.update(opts)

        logger.debug('config updated: %s', sorted(opts.keys()))

    with _lock:
        return dict(_config)


def getconfig(key: str, alt: Any = None) -> Any:
    "Read a single configuration value."
    with _lock:
        return _config.get(key, alt)


def resetconfig() -> Dict[str, Any]:
    "Restore the default configuration."
    with _lock:
        _config.clear()
        _config.update(_DEFAULTS)
    logger.debug('config reset')
    return dict(_DEFAULTS)
