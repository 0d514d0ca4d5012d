import yaml

from histogram_grid.helpers import InvalidInputError

DEFAULT_CONFIG = {
    "map": None,         # path to a map file, None for a 5x5 demo grid
    "blurring": 0.12,
    "steps": 1,
    "start": None,       # [row, col] of an impulse start belief, None for uniform
    "plot": None,        # where to save the belief evolution figure
    "precision": 2,      # decimals when printing grids
}


def load_config(config_path=None, overrides=None):
    """
    Reads a YAML config on top of DEFAULT_CONFIG.

    Values in ``overrides`` that are not None win over the file. Unknown keys and
    blur factors outside [0, 1] raise InvalidInputError.
    """
    config = dict(DEFAULT_CONFIG)

    if config_path is not None:
        with open(config_path, 'r') as f:
            file_config = yaml.safe_load(f)
            if file_config is None: file_config = {}
        if not isinstance(file_config, dict):
            raise InvalidInputError(f"Config {config_path} must be a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if overrides:
        config.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(config) - set(DEFAULT_CONFIG)
    if unknown:
        raise InvalidInputError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    config["blurring"] = _convert(config, "blurring", float)
    if not 0.0 <= config["blurring"] <= 1.0:
        raise InvalidInputError(f"blurring must be in [0, 1], got {config['blurring']}")

    config["steps"] = _convert(config, "steps", int)
    if config["steps"] < 0:
        raise InvalidInputError(f"steps must be non-negative, got {config['steps']}")

    config["precision"] = _convert(config, "precision", int)
    if config["precision"] < 0:
        raise InvalidInputError(f"precision must be non-negative, got {config['precision']}")

    if config["map"] is not None:
        config["map"] = _convert(config, "map", str)

    if config["start"] is not None:
        config["start"] = _convert(config, "start", _row_col)

    return config


def _row_col(value):
    if len(value) != 2:
        raise ValueError("expected [row, col]")
    return tuple(int(v) for v in value)


def _convert(config, key, convert):
    try:
        return convert(config[key])
    except (TypeError, ValueError):
        raise InvalidInputError(f"Bad value for {key}: {config[key]!r}")
