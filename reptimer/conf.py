from .exceptions import TimerError


class Configuration:
    """Package-wide defaults.

    time_unit        — seconds per delay unit, delays are in milliseconds
    strict_listeners — raise on unknown event kinds / non-callable listeners
                       instead of ignoring them
    loop             — event loop handed to schedulers created without one
    """

    defaults = {
        'time_unit': 0.001,
        'strict_listeners': True,
        'loop': None,
    }

    def __init__(self):
        self.reset()

    def configure(self, kwargs):
        for param, value in kwargs.items():
            param = param.lower()
            if param not in self.defaults:
                raise TimerError(f'Unknown setting: {param}')
            setattr(self, param, value)

    def reset(self):
        for param, value in self.defaults.items():
            setattr(self, param, value)


config = Configuration()
configure = config.configure
