"""
Tests for session-backed flash messages
"""
from starlette.requests import Request

from minimalizer.core.flash import FLASH_SESSION_KEY, Flash


def _request(session):
    return Request({"type": "http", "method": "GET", "path": "/", "headers": [], "session": session})


def test_flash_persists_messages_for_next_request():
    """Test that assigned messages are stored in the session"""
    session = {}
    flash = Flash(session)

    flash.notice = "Saved."

    assert flash.notice == "Saved."
    assert session[FLASH_SESSION_KEY] == {"notice": "Saved."}


def test_flash_incoming_messages_are_consumed():
    """Test that messages from the previous request are read once"""
    session = {FLASH_SESSION_KEY: {"notice": "Saved."}}

    flash = Flash(session)

    assert flash["notice"] == "Saved."
    assert FLASH_SESSION_KEY not in session
    assert Flash(session).notice is None


def test_flash_now_is_not_persisted():
    session = {}
    flash = Flash(session)

    flash.now.alert = "Try again."

    assert flash.alert == "Try again."
    assert flash.now.alert == "Try again."
    assert FLASH_SESSION_KEY not in session


def test_flash_precedence_now_over_outgoing_over_incoming():
    session = {FLASH_SESSION_KEY: {"alert": "old"}}
    flash = Flash(session)
    assert flash.alert == "old"

    flash.alert = "outgoing"
    assert flash.alert == "outgoing"

    flash.now["alert"] = "now"
    assert flash["alert"] == "now"
    assert session[FLASH_SESSION_KEY] == {"alert": "outgoing"}


def test_flash_assigning_none_removes_message():
    session = {FLASH_SESSION_KEY: {"notice": "old"}}
    flash = Flash(session)
    flash.notice = "new"

    flash.notice = None

    assert flash.notice is None
    assert "notice" not in flash
    assert FLASH_SESSION_KEY not in session


def test_flash_keep_and_discard():
    session = {FLASH_SESSION_KEY: {"notice": "carried"}}
    flash = Flash(session)

    flash.keep()
    assert session[FLASH_SESSION_KEY] == {"notice": "carried"}

    flash.discard("notice")
    assert FLASH_SESSION_KEY not in session


def test_flash_mapping_helpers():
    flash = Flash({})
    flash.notice = "a"
    flash.now.alert = "b"

    assert flash.to_dict() == {"notice": "a", "alert": "b"}
    assert sorted(flash.keys()) == ["alert", "notice"]
    assert len(flash) == 2
    assert dict(flash.items()) == {"notice": "a", "alert": "b"}


def test_flash_from_request_is_reused():
    """Test that one flash is shared by everything handling a request"""
    session = {FLASH_SESSION_KEY: {"notice": "hi"}}
    request = _request(session)

    first = Flash.from_request(request)
    second = Flash.from_request(request)

    assert first is second
    assert second.notice == "hi"


def test_flash_without_session_middleware():
    request = Request({"type": "http", "method": "GET", "path": "/", "headers": []})

    flash = Flash.from_request(request)
    flash.notice = "kept in memory"

    assert flash.notice == "kept in memory"
