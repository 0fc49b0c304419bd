import pytest

from chatwarden.core.identity import AdminSet, normalize_user_id, user_part


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("123", "123@c.us"),
        ("@123", "123@c.us"),
        (" 123@c.us ", "123@c.us"),
        ("123@s.whatsapp.net", "123@s.whatsapp.net"),
    ],
)
def test_normalize_user_id(value: str, expected: str) -> None:
    assert normalize_user_id(value) == expected


def test_normalize_user_id_custom_domain() -> None:
    assert normalize_user_id("@42", domain="s.whatsapp.net") == "42@s.whatsapp.net"


def test_user_part() -> None:
    assert user_part("5551234@c.us") == "5551234"
    assert user_part("plain") == "plain"


def test_admin_set_matches_phone_forms() -> None:
    admins = AdminSet(["+15550001111", "2000@c.us"])
    assert admins.is_admin("15550001111@c.us")
    assert admins.is_admin("15550001111:12@s.whatsapp.net")
    assert admins.is_admin("2000@c.us")
    assert admins.is_admin("2000:3@C.US")
    assert "2000@c.us" in admins
    assert not admins.is_admin("3000@c.us")
    assert not admins.is_admin("")
    assert len(admins) == 2


def test_admin_set_compares_full_sender_id() -> None:
    admins = AdminSet(["1000@c.us"])
    assert admins.is_admin("1000@c.us")
    assert not admins.is_admin("1000@lid")
    assert not admins.is_admin("1000:9@g.us")
    assert not admins.is_admin("1000")
    assert not AdminSet(["+15550001111"]).is_admin("15550001111@lid")


def test_admin_set_ignores_blank_entries() -> None:
    admins = AdminSet(["", "  "])
    assert len(admins) == 0
    assert not admins.is_admin("1000@c.us")
