"""The start, stop and status commands for the project's service containers."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from kool.builder import Command
from kool.environment import EnvStorage
from kool.network import NetworkHandler
from kool.shell import Shell
from kool.table import TableWriter

_MISSING_COMPOSE_PREFIX = "no configuration file provided: not found"


def _check_dependencies(checker, network, env) -> None:
    """Run the docker and network checks together; the docker error wins."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        docker = pool.submit(checker.check)
        net = pool.submit(network.handle_global_network, env.get("KOOL_GLOBAL_NETWORK"))
        docker.result()
        net.result()


@dataclass
class StartFlags:
    foreground: bool = False
    rebuild: bool = False
    profile: str = ""


class KoolRebuild:
    """Pulls and builds the services' images."""

    def __init__(self, shell=None, pull=None, build=None) -> None:
        self.shell = shell if shell is not None else Shell()
        self.pull = pull if pull is not None else Command("docker", "compose", "pull")
        self.build = build if build is not None else Command("docker", "compose", "build", "--pull")

    def execute(self, args=None) -> None:
        self.shell.interactive(self.pull)
        self.shell.interactive(self.build)


class KoolStart:
    """Starts the service containers defined in docker-compose.yml."""

    def __init__(
        self,
        shell,
        checker,
        network=None,
        env=None,
        start=None,
        rebuilder=None,
        flags=None,
    ) -> None:
        self.shell = shell
        self.checker = checker
        self.network = network if network is not None else NetworkHandler(shell)
        self.env = env if env is not None else EnvStorage()
        self.start = (
            start
            if start is not None
            else Command("docker", "compose", "up", "--force-recreate")
        )
        self.rebuilder = rebuilder if rebuilder is not None else KoolRebuild()
        self.flags = flags if flags is not None else StartFlags()

    def execute(self, args=None) -> None:
        args = list(args or [])

        if self.flags.rebuild:
            self._rebuild()

        if self.flags.profile:
            self.start.append_args("--profile", self.flags.profile)

        if not self.flags.foreground:
            self.start.append_args("-d")

        try:
            _check_dependencies(self.checker, self.network, self.env)
        except Exception as exc:
            if str(exc).startswith(_MISSING_COMPOSE_PREFIX):
                raise RuntimeError(
                    "could not find docker-compose.yml - check your current working "
                    f"directory.\n\n[err: {exc}]"
                ) from exc
            raise

        self.shell.interactive(self.start, *args)

    def _rebuild(self) -> None:
        target = self.rebuilder.shell
        target.in_stream = self.shell.in_stream
        target.out_stream = self.shell.out_stream
        target.err_stream = self.shell.err_stream
        self.rebuilder.execute([])


class KoolStatus:
    """Shows the status of all service containers as a table."""

    def __init__(
        self,
        shell,
        checker,
        network=None,
        env=None,
        get_services_cmd=None,
        get_service_id_cmd=None,
        get_service_status_port_cmd=None,
        table=None,
    ) -> None:
        self.shell = shell
        self.checker = checker
        self.network = network if network is not None else NetworkHandler(shell)
        self.env = env if env is not None else EnvStorage()
        self.get_services_cmd = (
            get_services_cmd
            if get_services_cmd is not None
            else Command("docker", "compose", "config", "--services")
        )
        self.get_service_id_cmd = (
            get_service_id_cmd
            if get_service_id_cmd is not None
            else Command("docker", "compose", "ps", "--all", "--quiet")
        )
        self.get_service_status_port_cmd = (
            get_service_status_port_cmd
            if get_service_status_port_cmd is not None
            else Command("docker", "ps", "--all", "--format", "{{.Status}}|{{.Ports}}")
        )
        self.table = table if table is not None else TableWriter()

    def execute(self, args=None) -> None:
        _check_dependencies(self.checker, self.network, self.env)

        services = self._get_services()
        if not services:
            self.shell.warning("No services found.")
            return

        self.table.writer = self.shell.out_stream
        self.table.append_header("Service", "Running", "Ports", "State")

        with ThreadPoolExecutor(max_workers=len(services)) as pool:
            futures = [pool.submit(self._service_row, service) for service in services]
            for future in as_completed(futures):
                self.table.append_row(*future.result())

        self.table.sort_by(1)
        self.table.render()

    def _get_services(self) -> list[str]:
        output = self.shell.exec(self.get_services_cmd)
        return [line for line in output.replace("\r\n", "\n").split("\n") if line != ""]

    def _service_row(self, service: str) -> tuple[str, str, str, str]:
        running, state, ports = self._get_service_info(service)
        return service, "Running" if running else "Not running", ports, state

    def _get_service_info(self, service: str) -> tuple[bool, str, str]:
        status = port = ""
        service_id = self.shell.exec(self.get_service_id_cmd, service)
        if service_id != "":
            status, port = self._get_status_port(service_id)
        return status.startswith("Up"), status, port

    def _get_status_port(self, service_id: str) -> tuple[str, str]:
        try:
            output = self.shell.exec(
                self.get_service_status_port_cmd, "--filter", f"ID={service_id}"
            )
        except Exception:
            return "", ""
        if output == "":
            return "", ""
        status, _, port = output.partition("|")
        return status, port


@dataclass
class StopFlags:
    purge: bool = False


class KoolStop:
    """Stops and destroys running service containers."""

    settle_seconds = 2.0

    def __init__(self, shell, checker, down=None, rm=None, flags=None) -> None:
        self.shell = shell
        self.checker = checker
        self.down = down if down is not None else Command("docker", "compose", "down")
        self.rm = rm if rm is not None else Command("docker", "compose", "rm")
        self.flags = flags if flags is not None else StopFlags()

    def execute(self, args=None) -> None:
        args = list(args or [])
        self.checker.check()

        if not args:
            self.down.append_args("--remove-orphans")
            if self.flags.purge:
                self.down.append_args("--volumes")
            stop_command = self.down
        else:
            self.rm.append_args("-s", "-f")
            if self.flags.purge:
                self.rm.append_args("-v")
                self.shell.warning(
                    "Attention: when stopping specific services, "
                    "only anonymous volumes will be removed."
                )
            self.rm.append_args(*args)
            stop_command = self.rm

        try:
            self.shell.interactive(stop_command)
        finally:
            time.sleep(self.settle_seconds)