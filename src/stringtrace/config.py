"""
Configuration management for stringtrace.

Loads YAML configuration with sensible defaults for every stage and turns
the relevant sections into a frozen Settings value for the trace core.
"""

import os
from dataclasses import asdict, dataclass, field, fields

import yaml
from pydantic import ValidationError

from stringtrace.models import ConfigurationError, Settings


@dataclass
class ImageConfig:
    """Configuration for target image preparation."""
    diameter: int = 500
    darken: int = 100  # 0..254, subtracted from every sample
    stretch_contrast: bool = False
    contrast: float = 0.5  # 0.0..1.0, only used with stretch_contrast


@dataclass
class StringConfig:
    """Configuration for the node layout and chord selection."""
    node_count: int = 200
    node_offset: float = 1.0
    string_alpha: float = 0.3
    max_chords: int = 6000
    allow_repeat_chords: bool = False
    distance_metric: str = "squared"  # "squared" or "absolute"


@dataclass
class RunConfig:
    """Configuration for driving a trace session."""
    parallel: bool = True
    steps_per_batch: int = 128
    snapshot_every: int = 0  # batches between canvas snapshots, 0 disables


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False
    max_edge_scale: int = 1600


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    image: ImageConfig = field(default_factory=ImageConfig)
    strings: StringConfig = field(default_factory=StringConfig)
    run: RunConfig = field(default_factory=RunConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


SECTIONS = ("image", "strings", "run", "tracing", "debug")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values. Unknown keys are ignored.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    for section_name in SECTIONS:
        values = yaml_data.get(section_name)
        if not isinstance(values, dict):
            continue
        section = getattr(config, section_name)
        for key, value in values.items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = PipelineConfig()

    yaml_data = {name: asdict(getattr(config, name)) for name in SECTIONS}
    # file_path is per invocation, not a default worth writing out
    yaml_data["tracing"].pop("file_path", None)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)


def build_settings(config):
    """
    Build the frozen trace Settings from a PipelineConfig.

    Raises ConfigurationError if any value is out of range.
    """
    values = {f.name: getattr(config.strings, f.name) for f in fields(config.strings)}
    values["diameter"] = config.image.diameter

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid trace settings: {e}") from e
