# errors.py
class WaveMutatorError(Exception):
    pass


class InvalidArgumentError(WaveMutatorError, ValueError):
    """Bad frequency, gain, amount or an unknown wave/mutation name."""


class AudioUnsupportedError(WaveMutatorError, RuntimeError):
    """No usable audio output. Fatal at startup, never retried."""


class PlaybackStateError(WaveMutatorError, RuntimeError):
    pass
