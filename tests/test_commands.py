from __future__ import annotations

from dataclasses import dataclass

import pytest

from kool.builder import Command
from kool.commands import (
    KoolRebuild,
    KoolStart,
    KoolStatus,
    KoolStop,
    StartFlags,
    StopFlags,
)
from kool.fakes import (
    FakeCommand,
    FakeEnvStorage,
    FakeNetworkHandler,
    FakeShell,
    FakeTableWriter,
)
from kool.network import NetworkHandler
from kool.shell import Shell
from kool.table import TableWriter


@dataclass
class StubChecker:
    mock_error: Exception | None = None
    called_check: bool = False

    def check(self) -> None:
        self.called_check = True
        if self.mock_error is not None:
            raise self.mock_error


# ---------------------------------------------------------------- start


def new_fake_start() -> KoolStart:
    return KoolStart(
        FakeShell(),
        StubChecker(),
        FakeNetworkHandler(),
        FakeEnvStorage(),
        FakeCommand(mock_cmd="start"),
        KoolRebuild(
            FakeShell(),
            FakeCommand(mock_cmd="pull"),
            FakeCommand(mock_cmd="build"),
        ),
        StartFlags(),
    )


def test_start_all_services_passes_no_arguments():
    start = new_fake_start()
    start.execute([])
    assert start.shell.args_interactive["start"] == []


def test_start_detached_by_default():
    start = new_fake_start()
    start.execute(None)
    assert start.start.args_append[0] == "-d"


def test_start_foreground_flag_appends_nothing():
    start = new_fake_start()
    start.flags.foreground = True
    start.execute(None)
    assert start.start.args_append == []


def test_start_profile_flag():
    start = new_fake_start()
    start.flags.profile = "dev"
    start.execute(None)
    assert start.start.args_append == ["--profile", "dev", "-d"]


def test_start_without_rebuild_does_not_pull_or_build():
    start = new_fake_start()
    start.execute(None)
    assert not start.rebuilder.pull.called_cmd
    assert not start.rebuilder.build.called_cmd


def test_start_rebuild_flag_pulls_and_builds():
    start = new_fake_start()
    start.flags.rebuild = True
    start.execute(None)
    rebuilder = start.rebuilder
    assert rebuilder.pull.called_cmd and rebuilder.build.called_cmd
    assert rebuilder.shell.called_set_out_stream
    assert rebuilder.shell.called_set_err_stream
    assert rebuilder.shell.called_set_in_stream


def test_rebuild_pull_error():
    rebuilder = new_fake_start().rebuilder
    error = RuntimeError("mock pull error")
    rebuilder.pull.mock_interactive_error = error
    with pytest.raises(RuntimeError) as info:
        rebuilder.execute(None)
    assert info.value is error
    assert "build" not in rebuilder.shell.called_interactive


def test_rebuild_build_error():
    rebuilder = new_fake_start().rebuilder
    error = RuntimeError("mock build error")
    rebuilder.build.mock_interactive_error = error
    with pytest.raises(RuntimeError) as info:
        rebuilder.execute(None)
    assert info.value is error


def test_start_specific_services():
    start = new_fake_start()
    start.execute(["app", "database"])
    assert start.shell.args_interactive["start"] == ["app", "database"]


def test_start_failed_dependencies():
    start = new_fake_start()
    start.checker.mock_error = RuntimeError("dependencies")
    with pytest.raises(RuntimeError, match="dependencies"):
        start.execute([])
    assert "start" not in start.shell.called_interactive


def test_start_failed_network():
    start = new_fake_start()
    start.network.mock_error = RuntimeError("network")
    with pytest.raises(RuntimeError, match="network"):
        start.execute([])
    assert start.network.network_name_arg == ""


def test_start_network_uses_global_network_name():
    start = new_fake_start()
    start.env.set("KOOL_GLOBAL_NETWORK", "kool_global")
    start.execute([])
    assert start.network.network_name_arg == "kool_global"


def test_start_docker_error_takes_precedence():
    start = new_fake_start()
    start.checker.mock_error = RuntimeError("docker down")
    start.network.mock_error = RuntimeError("network")
    with pytest.raises(RuntimeError, match="docker down"):
        start.execute([])


def test_start_missing_compose_file_message():
    start = new_fake_start()
    start.checker.mock_error = RuntimeError("no configuration file provided: not found")
    with pytest.raises(RuntimeError, match="could not find docker-compose.yml"):
        start.execute([])


def test_start_with_error():
    start = new_fake_start()
    start.start.mock_interactive_error = RuntimeError("start")
    with pytest.raises(RuntimeError, match="start"):
        start.execute([])


# ---------------------------------------------------------------- status


def new_fake_status() -> KoolStatus:
    return KoolStatus(
        FakeShell(),
        StubChecker(),
        FakeNetworkHandler(),
        FakeEnvStorage(),
        FakeCommand(),
        FakeCommand(),
        FakeCommand(),
        FakeTableWriter(),
    )


def test_new_kool_status_defaults():
    status = KoolStatus(Shell(), StubChecker())
    assert isinstance(status.network, NetworkHandler)
    assert isinstance(status.table, TableWriter)
    assert str(status.get_services_cmd) == "docker compose config --services"
    assert str(status.get_service_id_cmd) == "docker compose ps --all --quiet"
    assert str(status.get_service_status_port_cmd) == (
        "docker ps --all --format {{.Status}}|{{.Ports}}"
    )


def test_status_command():
    status = new_fake_status()
    status.get_services_cmd.mock_exec_out = "app"
    status.get_service_id_cmd.mock_exec_out = "100"
    status.get_service_status_port_cmd.mock_exec_out = (
        "Up About an hour|0.0.0.0:80->80/tcp, 9000/tcp"
    )
    status.execute([])
    expected = (
        "Service | Running | Ports | State\n"
        "app | Running | 0.0.0.0:80->80/tcp, 9000/tcp | Up About an hour"
    )
    assert status.table.table_out.strip() == expected


def test_not_running_status_command():
    status = new_fake_status()
    status.get_services_cmd.mock_exec_out = "app"
    status.get_service_id_cmd.mock_exec_out = "100"
    status.get_service_status_port_cmd.mock_exec_out = "Exited an hour ago"
    status.execute([])
    expected = (
        "Service | Running | Ports | State\n"
        "app | Not running |  | Exited an hour ago"
    )
    assert status.table.table_out.strip() == expected


def test_no_status_port_status_command():
    status = new_fake_status()
    status.get_services_cmd.mock_exec_out = "app"
    status.get_service_id_cmd.mock_exec_out = "100"
    status.execute([])
    expected = "Service | Running | Ports | State\napp | Not running |  |"
    assert status.table.table_out.strip() == expected


def test_no_services_status_command():
    status = new_fake_status()
    status.execute([])
    assert "".join(status.shell.warning_output) == "No services found."
    assert not status.table.called_render


def test_failed_get_services_status_command():
    status = new_fake_status()
    status.get_services_cmd.mock_exec_error = RuntimeError("exec err")
    with pytest.raises(RuntimeError, match="exec err"):
        status.execute([])
    assert "".join(status.shell.warning_output) == ""

    status.get_services_cmd.mock_exec_error = None
    status.execute([])
    assert "".join(status.shell.warning_output) == "No services found."


def test_failed_dependencies_status_command():
    status = new_fake_status()
    status.checker.mock_error = RuntimeError("exec error")
    with pytest.raises(RuntimeError, match="exec error"):
        status.execute([])


def test_failed_network_status_command():
    status = new_fake_status()
    status.network.mock_error = RuntimeError("exec network error")
    with pytest.raises(RuntimeError, match="exec network error"):
        status.execute([])


def test_failed_get_service_id_status_command():
    status = new_fake_status()
    status.get_services_cmd.mock_exec_out = "app"
    status.get_service_id_cmd.mock_exec_error = RuntimeError("get service error")
    with pytest.raises(RuntimeError, match="get service error"):
        status.execute([])


def test_services_order_status_command():
    status = new_fake_status()
    status.get_services_cmd.mock_exec_out = "cache\r\napp"
    status.get_service_id_cmd.mock_exec_out = "output"
    status.get_service_status_port_cmd.mock_exec_out = "output"
    status.execute([])
    expected = (
        "Service | Running | Ports | State\n"
        "app | Not running |  | output\n"
        "cache | Not running |  | output"
    )
    assert status.table.table_out.strip() == expected


# ---------------------------------------------------------------- stop


def new_fake_stop() -> KoolStop:
    stop = KoolStop(FakeShell(), StubChecker(), FakeCommand(), FakeCommand(), StopFlags())
    stop.settle_seconds = 0
    return stop


def test_new_kool_stop_defaults():
    stop = KoolStop(Shell(), StubChecker())
    assert stop.flags.purge is False
    assert str(stop.down) == "docker compose down"
    assert str(stop.rm) == "docker compose rm"


def test_stop_all_services():
    stop = new_fake_stop()
    stop.execute([])
    assert stop.checker.called_check
    assert stop.down.args_append == ["--remove-orphans"]
    assert not stop.rm.called_append_args


def test_stop_with_services():
    stop = new_fake_stop()
    stop.execute(["a", "b"])
    assert stop.rm.called_append_args
    assert stop.rm.args_append == ["-s", "-f", "a", "b"]
    assert not stop.down.called_append_args


def test_stop_purge():
    stop = new_fake_stop()
    stop.flags.purge = True
    stop.execute([])
    assert stop.down.args_append == ["--remove-orphans", "--volumes"]


def test_stop_purge_with_services():
    stop = new_fake_stop()
    stop.flags.purge = True
    stop.execute(["a", "b"])
    assert stop.rm.args_append == ["-s", "-f", "-v", "a", "b"]
    assert "only anonymous volumes" in "".join(stop.shell.warning_output)


def test_stop_failing_dependencies_check():
    stop = new_fake_stop()
    stop.checker.mock_error = RuntimeError("check error")
    with pytest.raises(RuntimeError, match="check error"):
        stop.execute([])
    assert stop.shell.called_interactive == {}


def test_stop_interactive_error_is_raised():
    stop = new_fake_stop()
    stop.down.mock_interactive_error = RuntimeError("down failed")
    with pytest.raises(RuntimeError, match="down failed"):
        stop.execute([])


def test_stop_with_real_command_objects_records_arguments():
    stop = KoolStop(FakeShell(), StubChecker(), Command("docker", "compose", "down"))
    stop.settle_seconds = 0
    stop.execute([])
    assert stop.shell.called_interactive == {"docker": True}
    assert str(stop.down) == "docker compose down --remove-orphans"