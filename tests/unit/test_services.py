# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from pathlib import Path

import pytest

from netprobe.models import Protocol, ServiceRecord
from netprobe.port.services import (
    load_services,
    parse_service_line,
    parse_services,
    service_info,
    service_name,
    services_file_path,
)

SERVICES_TABLE = """\
# Network services, Internet style
#
tcpmux          1/tcp                           # TCP port service multiplexer
echo            7/tcp
echo            7/udp
ssh             22/tcp                          # SSH Remote Login Protocol
ssh             22/udp                          # SSH Remote Login Protocol
smtp            25/tcp          mail
http            80/tcp          www www-http    # WorldWideWeb HTTP
discard         9/sctp                          # SCTP discard
this line has no port field
badport         99999/tcp
nonum           abc/tcp
weird           23/xyz
"""


@pytest.fixture
def services_file(tmp_path):
    path = tmp_path / "services"
    path.write_text(SERVICES_TABLE, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_services_env(monkeypatch):
    monkeypatch.delenv("NETPROBE_SERVICES_FILE", raising=False)
    monkeypatch.delenv("SERVICES_FILE_PATH", raising=False)


def test_parse_service_line_with_aliases_and_description():
    record = parse_service_line("http            80/tcp          www www-http    # WorldWideWeb HTTP")
    assert record == ServiceRecord(
        name="http",
        port=80,
        protocol=Protocol.TCP,
        description="WorldWideWeb HTTP",
        aliases=("www", "www-http"),
    )


def test_parse_service_line_without_description():
    record = parse_service_line("smtp 25/tcp mail")
    assert record is not None
    assert record.description == ""
    assert record.aliases == ("mail",)


@pytest.mark.parametrize(
    "line",
    [
        "",
        "   ",
        "# ssh 22/tcp",
        "this line has no port field",
        "badport 99999/tcp",
        "nonum abc/tcp",
        "weird 23/xyz",
        "glued 22/tcpextra",
    ],
)
def test_parse_service_line_skips_non_entries(line):
    assert parse_service_line(line) is None


def test_parse_services_keeps_only_entries():
    records = parse_services(SERVICES_TABLE.splitlines())
    assert [r.name for r in records] == ["tcpmux", "echo", "echo", "ssh", "ssh", "smtp", "http", "discard"]
    assert records[-1].protocol is Protocol.SCTP


def test_service_info_returns_every_protocol_variant(services_file):
    records = service_info(22, path=services_file)
    assert [(r.name, r.port, r.protocol) for r in records] == [
        ("ssh", 22, Protocol.TCP),
        ("ssh", 22, Protocol.UDP),
    ]
    assert records[0].description == "SSH Remote Login Protocol"


def test_service_info_filters_by_protocol(services_file):
    assert [r.protocol for r in service_info(7, path=services_file, protocol="udp")] == [Protocol.UDP]
    assert [r.protocol for r in service_info(7, path=services_file, protocol=Protocol.TCP)] == [Protocol.TCP]
    assert service_info(7, path=services_file, protocol="gopher") == []


def test_service_info_unknown_port_is_empty_list(services_file):
    assert service_info(4242, path=services_file) == []
    assert service_info(None, path=services_file) == []


def test_service_info_missing_table_is_none(tmp_path):
    assert service_info(8080, path=tmp_path / "missing") is None
    assert service_name(8080, path=tmp_path / "missing") is None


def test_service_info_surfaces_other_io_errors(tmp_path):
    with pytest.raises(OSError):
        service_info(22, path=tmp_path)


def test_service_name_projects_names(services_file):
    assert service_name(22, path=services_file) == ["ssh", "ssh"]
    assert service_name(22, path=services_file, protocol="tcp") == ["ssh"]
    assert service_name(4242, path=services_file) == []


def test_services_path_from_environment(monkeypatch, services_file, tmp_path):
    monkeypatch.setenv("NETPROBE_SERVICES_FILE", str(services_file))
    assert services_file_path() == services_file
    assert service_name(80) == ["http"]

    monkeypatch.delenv("NETPROBE_SERVICES_FILE")
    monkeypatch.setenv("SERVICES_FILE_PATH", str(tmp_path / "whatever"))
    assert service_info(8080) is None


def test_load_services_default_path(monkeypatch):
    assert services_file_path() == Path("/etc/services")
    monkeypatch.setenv("NETPROBE_SERVICES_FILE", "/nonexistent/services")
    assert load_services() is None


@pytest.mark.skipif(not Path("/etc/services").exists(), reason="system services table not available")
def test_system_table_knows_ssh():
    records = service_info(22)
    assert records
    ssh = records[0]
    assert ssh.name == "ssh"
    assert ssh.port == 22
    assert ssh.protocol in {Protocol.TCP, Protocol.UDP}
