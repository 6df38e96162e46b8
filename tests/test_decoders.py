from datetime import datetime, timezone
from ipaddress import ip_address

from dhcpleases.decoders import DEFAULT_REGISTRY, build_registry, parse_mac, split_statements
from dhcpleases.model import Lease


def _decode(text: str) -> Lease:
    return DEFAULT_REGISTRY.decode_block(Lease(), text)


def test_binding_states_do_not_cross_contaminate():
    lease = _decode(
        """
        next binding state free;
        binding state active;
        rewind binding state backup;
        """
    )
    assert lease.binding_state == "active"
    assert lease.next_binding_state == "free"
    assert lease.rewind_binding_state == "backup"


def test_next_binding_state_alone_leaves_binding_state_empty():
    lease = _decode("  next binding state free;\n  rewind binding state free;\n")
    assert lease.binding_state == ""


def test_each_statement_fires_exactly_one_rule():
    lines = [
        "  starts 6 2019/04/27 03:24:45;",
        "  atsfp 6 2019/04/27 03:34:45;",
        "  tsfp 6 2019/04/27 03:34:45;",
        "  binding state free;",
        "  next binding state free;",
        '  uid "\\001\\000\\333p\\303\\021\\327";',
        "  hardware ethernet 00:db:70:c3:11:d7;",
    ]
    for line in lines:
        assert DEFAULT_REGISTRY.decode_line(Lease(), line) == 1, line


def test_atsfp_does_not_set_tsfp():
    lease = _decode("  atsfp 6 2019/04/27 03:34:45;\n")
    assert lease.atsfp == datetime(2019, 4, 27, 3, 34, 45, tzinfo=timezone.utc)
    assert lease.tsfp is None


def test_uid_is_kept_verbatim():
    lease = _decode('  uid "\\001\\000\\333p\\303\\021\\327";')
    assert lease.uid == "\\001\\000\\333p\\303\\021\\327"


def test_lease_and_host_headers():
    assert _decode("lease 172.24.43.3 {").ip == ip_address("172.24.43.3")
    assert _decode("lease 2001:db8::10 {").ip == ip_address("2001:db8::10")
    host = _decode("host test1.example.com {\n  fixed-address 10.113.10.24;\n")
    assert host.client_hostname == "test1.example.com"
    assert host.ip == ip_address("10.113.10.24")


def test_unparseable_ip_is_left_unset():
    assert _decode("  fixed-address printer.example.com;").ip is None


def test_client_hostname_and_vendor_fields():
    lease = _decode(
        """
  client-hostname "gertrude";
  set vendor-class-identifier = "MSFT 5.0";
  set vendor-name = "Acme";
  option agent.circuit-id "eth0:100";
  option agent.remote-id 0:1b:21:3c:4d:5e;
"""
    )
    assert lease.client_hostname == "gertrude"
    assert lease.vendor_class_id == "MSFT 5.0"
    assert lease.vendor_name == "Acme"
    assert lease.relay_circuit_id == '"eth0:100"'
    assert lease.relay_remote_id == "0:1b:21:3c:4d:5e"


def test_hardware_line_parses_mac():
    lease = _decode("  hardware ethernet 00:db:70:c3:11:d7;")
    assert lease.hardware.hardware == "ethernet"
    assert lease.hardware.mac == "00:db:70:c3:11:d7"
    assert lease.hardware.mac_addr == bytes.fromhex("00db70c311d7")


def test_malformed_hardware_keeps_text_only():
    lease = _decode("  hardware ethernet 00:db:70:zz:11;")
    assert lease.hardware.hardware == "ethernet"
    assert lease.hardware.mac == "00:db:70:zz:11"
    assert lease.hardware.mac_addr is None


def test_hardware_without_address():
    lease = _decode("  hardware token-ring;")
    assert lease.hardware.hardware == "token-ring"
    assert lease.hardware.mac == ""
    assert lease.hardware.mac_addr is None


def test_parse_mac_forms():
    assert parse_mac("00-DB-70-C3-11-D7") == bytes.fromhex("00db70c311d7")
    assert parse_mac("00db.70c3.11d7") == bytes.fromhex("00db70c311d7")
    assert parse_mac("00:00:00:00:fe:80:00:00") == bytes.fromhex("00000000fe800000")
    assert parse_mac("0:db:70:c3:11:d7") is None
    assert parse_mac("00:db:70:c3:11") is None
    assert parse_mac("00:db-70:c3:11:d7") is None


def test_unrecognized_lines_are_ignored():
    lease = _decode(
        """
  dynamic;
  supersede server.filename = "pxelinux.0";
  # binding state active;
  set ddns-fwd-name = "host.example.com";
"""
    )
    assert lease == Lease()


def test_build_registry_uses_zone_table():
    registry = build_registry({"SAST": 120})
    lease = registry.decode_block(Lease(), "  ends 6 2019/04/27 03:34:45 SAST;")
    assert lease.ends == datetime(2019, 4, 27, 1, 34, 45, tzinfo=timezone.utc)
    assert "binding_state" in registry.fields


def test_split_statements_honours_quotes_and_comments():
    assert split_statements('  uid "\\001\\000\\023r\\323;\\230";') == [
        '  uid "\\001\\000\\023r\\323;\\230";'
    ]
    assert split_statements("lease 10.0.0.1 { starts 6 2019/04/27 03:24:45; }") == [
        "lease 10.0.0.1 {",
        " starts 6 2019/04/27 03:24:45;",
        " }",
    ]
    assert split_statements("  starts epoch 1556335485; # Sat Apr 27 03:24:45 2019") == [
        "  starts epoch 1556335485;"
    ]
    assert split_statements("# only a comment") == []


def test_single_line_block_decodes_every_statement():
    lease = _decode(
        'lease 172.24.43.3 { starts 6 2019/04/27 03:24:45; binding state free; uid "a;b"; }'
    )
    assert lease.ip == ip_address("172.24.43.3")
    assert lease.starts == datetime(2019, 4, 27, 3, 24, 45, tzinfo=timezone.utc)
    assert lease.binding_state == "free"
    assert lease.uid == "a;b"


def test_build_registry_accepts_lower_case_zone_names():
    registry = build_registry({"sast": 120})
    lease = registry.decode_block(Lease(), "  ends 6 2019/04/27 03:34:45 SAST;")
    assert lease.ends == datetime(2019, 4, 27, 1, 34, 45, tzinfo=timezone.utc)
