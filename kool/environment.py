"""Environment variable storage and initialisation."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values

DEFAULT_ENV_FILES = (".env.local", ".env")


class EnvStorage:
    """Environment variables backed by the process environment."""

    def get(self, key: str) -> str:
        return os.environ.get(key, "")

    def set(self, key: str, value: str) -> None:
        os.environ[key] = value

    def load(self, filename: str) -> None:
        """Load a dotenv file without overriding variables already set."""
        if not os.path.exists(filename):
            raise FileNotFoundError(f"open {filename}: no such file or directory")
        for key, value in dotenv_values(filename).items():
            if key not in os.environ:
                os.environ[key] = value if value is not None else ""

    def all(self) -> list[str]:
        return [f"{key}={value}" for key, value in os.environ.items()]

    def is_true(self, key: str) -> bool:
        return self.get(key) in ("1", "true")


def uid() -> str:
    getuid = getattr(os, "getuid", None)
    return str(getuid() if getuid is not None else -1)


def init_uid(env_storage) -> None:
    if env_storage.get("UID") == "":
        env_storage.set("UID", uid())


def init_asuser(env_storage) -> None:
    if env_storage.get("KOOL_ASUSER") == "":
        env_storage.set("KOOL_ASUSER", uid())


def init_environment_variables(env_storage, env_files=None) -> None:
    """Load dotenv files and fill in the variables the tool relies on."""
    if env_files is None:
        env_files = DEFAULT_ENV_FILES

    if env_storage.get("HOME") == "":
        env_storage.set("HOME", str(Path.home()))

    init_uid(env_storage)

    if env_storage.get("PWD") == "":
        env_storage.set("PWD", os.getcwd())

    for env_file in env_files:
        if os.path.exists(env_file):
            env_storage.load(env_file)

    if env_storage.get("KOOL_NAME") == "":
        env_storage.set("KOOL_NAME", env_storage.get("PWD").split(os.sep)[-1])

    if env_storage.get("KOOL_GLOBAL_NETWORK") == "":
        env_storage.set("KOOL_GLOBAL_NETWORK", "kool_global")

    init_asuser(env_storage)