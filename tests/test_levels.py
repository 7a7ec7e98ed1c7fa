import pytest

from mmlogscrub.levels import scrub_email, scrub_ip, scrub_uid, scrub_username


def test_email_level1_worked_example():
    assert scrub_email("alice@example.com", 1) == "**ice@example.com"


def test_email_level1_keeps_last_three_and_domain():
    email = "jonathan.doe@example.com"
    result = scrub_email(email, 1)
    local = email.split("@")[0]
    assert len(result) == len(email)
    assert result.endswith(local[-3:] + "@example.com")
    assert set(result.split("@")[0][:-3]) == {"*"}


@pytest.mark.parametrize("local", ["a", "ab", "abc"])
def test_email_level1_short_local_fully_masked(local):
    result = scrub_email(local + "@example.com", 1)
    masked, domain = result.split("@")
    assert set(masked) == {"*"}
    assert len(masked) == len(local)
    assert domain == "example.com"


def test_email_level2_masks_local_only():
    result = scrub_email("bob@example.com", 2)
    masked, domain = result.split("@")
    assert masked == "*" * len("bob")
    assert domain == "example.com"


def test_email_level3_masks_everything_but_at():
    email = "bob@example.com"
    result = scrub_email(email, 3)
    assert len(result) == len(email)
    assert result.replace("@", "") == "*" * (len(email) - 1)
    assert result.count("@") == 1


@pytest.mark.parametrize("value", ["no-at-sign", "a@b@example.com"])
def test_email_invalid_format_unchanged(value):
    for level in (1, 2, 3):
        assert scrub_email(value, level) == value


def test_email_unknown_level_unchanged():
    assert scrub_email("bob@example.com", 0) == "bob@example.com"


def test_username_level1():
    result = scrub_username("carolina", 1)
    assert result.endswith("ina")
    assert result[:-3] == "*" * (len("carolina") - 3)


def test_username_level1_short():
    assert scrub_username("ed", 1) == "**"


@pytest.mark.parametrize("level", [2, 3])
def test_username_full_mask(level):
    name = "carolina"
    assert scrub_username(name, level) == "*" * len(name)


def test_username_other_level_unchanged():
    assert scrub_username("carolina", 4) == "carolina"


def test_ip_level2_keeps_last_octet():
    assert scrub_ip("192.168.1.42", 2) == "***.***.***." + "42"


def test_ip_level3_masks_all():
    assert scrub_ip("192.168.1.42", 3) == "***.***.***.***"


def test_ip_level1_unchanged():
    assert scrub_ip("192.168.1.42", 1) == "192.168.1.42"


def test_ip_invalid_format_unchanged():
    assert scrub_ip("1.2.3", 3) == "1.2.3"


def test_uid_level3_keeps_last_eight_with_fixed_length():
    uid = "abcdefghijklmnopqrstuvwxyz"
    result = scrub_uid(uid, 3)
    assert len(result) == 26
    assert result.endswith(uid[-8:])
    assert set(result[:-8]) == {"*"}


def test_uid_level3_longer_input_normalised_to_26():
    uid = "a" * 40 + "12345678"
    result = scrub_uid(uid, 3)
    assert len(result) == 26
    assert result.endswith("12345678")


def test_uid_level3_short_fully_masked():
    assert scrub_uid("abc", 3) == "***"


@pytest.mark.parametrize("level", [1, 2])
def test_uid_lower_levels_unchanged(level):
    uid = "abcdefghijklmnopqrstuvwxyz"
    assert scrub_uid(uid, level) == uid