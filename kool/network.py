"""Ensuring the shared docker network exists."""

from __future__ import annotations

from kool.builder import Command


class NetworkHandler:
    """Creates the global docker network when it is missing."""

    def __init__(self, shell, check_network_cmd=None, create_network_cmd=None) -> None:
        self.shell = shell
        self.check_network_cmd = check_network_cmd or Command("docker", "network", "ls", "-q", "-f")
        self.create_network_cmd = create_network_cmd or Command(
            "docker", "network", "create", "--attachable"
        )

    def handle_global_network(self, network_name: str) -> None:
        network_id = self.shell.exec(self.check_network_cmd, f"NAME=^{network_name}$")
        if network_id != "":
            return
        self.shell.interactive(self.create_network_cmd, network_name)