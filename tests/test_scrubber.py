import csv
import io
import json

import pytest

from mmlogscrub.scrubber import Scrubber, ScrubStats


def make(level, verbose=False):
    return Scrubber(level, verbose=verbose, out=io.StringIO())


def test_email_replaced_with_placeholder():
    s = make(1)
    assert s.scrub_text("contact alice@example.com now") == "contact [email] now"
    entry = s.audit_entries["alice@example.com"]
    assert (entry.new_value, entry.times_replaced, entry.kind) == ("[email]", 1, "email")


def test_json_username_mapped_consistently_ignoring_case():
    s = make(1)
    first = s.process_line('{"user":"Alice"}')
    second = s.process_line('{"username":"alice"}')
    assert json.loads(first)["user"] == json.loads(second)["username"]
    assert json.loads(first)["user"].startswith("user")
    assert "Alice" not in first


def test_username_with_spaces_around_colon_left_alone():
    s = make(2)
    line = '{"user" : "bob"}'
    assert s.process_line(line) == line


def test_user_and_email_pair_share_one_pseudonym():
    s = make(1)
    s.process_line('{"user":"carol","email":"carol@example.com"}')
    assert s.user_mappings["carol"] is s.user_mappings["carol@example.com"]
    assert s.mapped_name("CAROL") == s.mapped_name("carol")


def test_nested_pairs_are_detected():
    s = make(1)
    s.process_line('{"msg":"x","data":[{"username":"dave","email":"dave@example.com"}]}')
    assert s.user_mappings["dave"].email == "dave@example.com"


def test_standalone_names_get_distinct_pseudonyms():
    s = make(1)
    s.create_user_mapping("erin", "erin@example.com")
    other = s.mapped_name("frank")
    assert other != s.mapped_name("erin")
    assert s.mapped_email("ERIN@example.com") == "[email]"


def test_create_user_mapping_links_missing_username():
    s = make(1)
    s.mapped_email("gina@example.com")
    s.create_user_mapping("gina", "gina@example.com")
    assert s.user_mappings["gina"] is s.user_mappings["gina@example.com"]
    assert s.user_mappings["gina"].username == "gina"


@pytest.mark.parametrize(
    "level,expected",
    [(1, "from 10.1.2.4 ok"), (2, "from ***.***.***.4 ok"), (3, "from ***.***.***.*** ok")],
)
def test_ip_scrubbing_by_level(level, expected):
    assert make(level).scrub_text("from 10.1.2.4 ok") == expected


def test_uid_scrubbed_only_at_level_three():
    uid = "abcdefghijklmnopqrst12345678"
    assert make(2).scrub_text(f"id {uid}") == f"id {uid}"
    result = make(3).scrub_text(f"id {uid}")
    assert result == "id " + "*" * 18 + uid[-8:]


def test_repeated_values_counted_in_audit():
    s = make(2)
    s.scrub_text("10.0.0.1 and 10.0.0.1")
    assert s.audit_entries["10.0.0.1"].times_replaced == 2
    assert s.audit_entries["10.0.0.1"].kind == "ip"


def test_plain_text_line_is_scrubbed():
    s = make(2)
    assert s.process_line("login from 192.168.0.9") == "login from ***.***.***.9"


def test_process_file_writes_output_and_counts(tmp_path):
    src = tmp_path / "in.log"
    src.write_bytes(b'{"user":"hank","ip":"1.2.3.4"}\r\n\n   \nhank@example.com\n')
    dst = tmp_path / "out.log"
    s = make(2)
    stats = s.process_file(src, dst, False)
    assert stats == ScrubStats(total=4, processed=2, empty=2)
    lines = dst.read_text().split("\n")
    assert lines[-1] == ""
    first = json.loads(lines[0])
    assert first["ip"] == "***.***.***.4"
    assert first["user"].startswith("user")
    assert lines[1] == "[email]"
    assert "Processed 2 lines out of 4 total lines (2 empty lines skipped)" in s.out.getvalue()


def test_dry_run_writes_nothing(tmp_path):
    src = tmp_path / "in.log"
    src.write_text("a@example.com\n")
    dst = tmp_path / "out.log"
    s = make(1, verbose=True)
    stats = s.process_file(src, dst, True)
    assert not dst.exists()
    assert stats.processed == 1
    assert "Line 1 would be scrubbed" in s.out.getvalue()


def test_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        make(1).process_file(tmp_path / "absent.log", tmp_path / "out.log", False)


def test_audit_file_round_trip(tmp_path):
    s = make(2)
    s.scrub_text("ivy@example.com 8.8.4.4 8.8.4.4")
    path = tmp_path / "audit.csv"
    s.write_audit_file(path)
    with open(path, newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == ["Original Value", "New Value", "Times Replaced", "Type"]
    by_value = {row[0]: row for row in rows[1:]}
    assert by_value["ivy@example.com"] == ["ivy@example.com", "[email]", "1", "email"]
    assert by_value["8.8.4.4"][2] == "2"
    assert len(rows) == len(s.audit_entries) + 1