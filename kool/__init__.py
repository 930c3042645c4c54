"""Building blocks for docker compose development environments: commands, shell, kool.yml scripts, presets and recipes."""

__version__ = "0.1.0"