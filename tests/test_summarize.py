from datetime import datetime, timezone

from dhcpleases.data.generator import generate_leases_file
from dhcpleases.parser import parse_bytes
from dhcpleases.summarize import summarize_leases

NOW = datetime(2019, 4, 27, 3, 30, 0, tzinfo=timezone.utc)


def test_summarize_counts_states_and_duplicates():
    data = (
        b"lease 10.0.0.1 {\n  ends 6 2019/04/27 03:34:45;\n  binding state active;\n"
        b"  hardware ethernet 00:11:22:33:44:55;\n}\n"
        b"lease 10.0.0.2 {\n  binding state free;\n  hardware ethernet 00:11:22:33:44:66;\n}\n"
        b"lease 10.0.0.1 {\n  ends 6 2019/04/27 03:00:00;\n  binding state active;\n"
        b"  hardware ethernet 00:11:22:33:44:55;\n}\n"
        b"host printer {\n  hardware ethernet 00:11:22:33:44:77;\n  fixed-address 10.0.0.9;\n}\n"
    )
    summary = summarize_leases(parse_bytes(data), now=NOW)
    assert summary["leases"] == 4
    assert summary["binding_states"] == {"active": 2, "free": 1}
    assert summary["active"] == 1
    assert summary["hosts"] == 1
    assert summary["distinct_ips"] == 3
    assert summary["distinct_macs"] == 3
    assert summary["duplicate_ips"] == ["10.0.0.1"]


def test_summarize_generated_file():
    data, meta = generate_leases_file(count=12, seed=3, hosts=1)
    summary = summarize_leases(parse_bytes(data), now=NOW)
    assert summary["leases"] == len(meta)
    assert sum(summary["binding_states"].values()) == 12
    assert summary["hosts"] == 1


def test_summarize_empty():
    summary = summarize_leases([])
    assert summary["leases"] == 0
    assert summary["duplicate_ips"] == []
