# config.py

import copy
import os

import yaml

from .engine.pacing import DEFAULT_DELAYS_MS, PacingPolicy


class Config:
    """Host configuration loaded from a JSON or YAML file.

    Only the command line host reads this class. Engines receive everything
    they need through an explicit :class:`~Sort_Stream.engine.context.RunContext`.

    Attributes
    ----------
    length:
        Number of elements generated for a run.
    seed:
        Seed for the NumPy generator producing the input. ``None`` draws a
        fresh seed.
    value_range:
        ``[low, high)`` bounds for generated values.
    algorithm:
        Name of the engine looked up in :data:`~Sort_Stream.engine.registry.ENGINES`.
    pacing_ms:
        Per-pause delays in milliseconds. Keys are ``divide``,
        ``merge_start``, ``compare``, ``place``, ``drain`` and ``merge_done``.
    speed:
        Divisor applied to every delay; ``2.0`` runs twice as fast.
    frame_interval:
        Seconds between rendered frames on the consumer side.
    trace_file:
        Optional path the recorded trace is written to.
    summary_log:
        Optional JSON-lines file receiving one summary record per run.
    """

    config_file: str | None = None

    length = 16
    seed: int | None = 0
    value_range = [1, 100]
    algorithm = "merge"
    pacing_ms = dict(DEFAULT_DELAYS_MS)
    speed = 1.0
    frame_interval = 0.05
    trace_file: str | None = None
    summary_log: str | None = None
    log_level = "INFO"

    _PATH_KEYS = ("trace_file", "summary_log")
    _DEFAULTS: dict = {}

    @classmethod
    def snapshot(cls) -> dict:
        """Return a copy of the current public settings."""
        return {
            key: copy.deepcopy(value)
            for key, value in vars(cls).items()
            if not key.startswith("_")
            and not callable(value)
            and not isinstance(value, (classmethod, staticmethod))
        }

    @classmethod
    def reset(cls) -> None:
        """Restore the defaults captured at import time."""
        for key, value in cls._DEFAULTS.items():
            setattr(cls, key, copy.deepcopy(value))

    @classmethod
    def pacing_policy(cls, no_delay: bool = False) -> PacingPolicy:
        """Build the pacing policy described by ``pacing_ms`` and ``speed``."""
        if no_delay:
            return PacingPolicy.instant()
        return PacingPolicy.from_milliseconds(cls.pacing_ms, scale=cls.speed)

    @classmethod
    def load_from_file(cls, path: str) -> None:
        """Load configuration values from a JSON or YAML file.

        Only keys that already exist as attributes on ``Config`` will be
        assigned. Nested dictionaries are merged when the existing attribute
        is also a ``dict``. Relative ``trace_file`` and ``summary_log`` paths
        are resolved relative to the directory containing ``path``.

        Parameters
        ----------
        path:
            Path to the configuration file. ``.yaml`` and ``.yml`` files are
            parsed with PyYAML, anything else as JSON.
        """
        import json

        if not os.path.exists(path):
            raise FileNotFoundError(path)
        with open(path) as f:
            if path.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"configuration root must be a mapping: {path}")
        cls.config_file = os.path.abspath(path)
        base_dir = os.path.dirname(cls.config_file)

        for key, value in data.items():
            if key.startswith("_") or not hasattr(cls, key):
                continue
            if key in cls._PATH_KEYS and value and not os.path.isabs(value):
                value = os.path.join(base_dir, value)
            current = getattr(cls, key)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                setattr(cls, key, value)


Config._DEFAULTS = Config.snapshot()


def load_config(path: str) -> dict:
    """Load configuration from ``path`` and return the resulting settings."""
    Config.load_from_file(path)
    return Config.snapshot()
