"""
Tests for translation lookup
"""
import json

import pytest
from markupsafe import Markup

from minimalizer.core.i18n import Translator, get_translator


@pytest.fixture
def translator(tmp_path):
    (tmp_path / "en.json").write_text(json.dumps({
        "posts": {
            "create": {
                "notice": "Post %{title} created.",
                "notice_html": "Post <b>%{title}</b> created.",
            }
        },
        "greeting": "Hello",
    }), encoding="utf-8")
    (tmp_path / "de.json").write_text(json.dumps({"greeting": "Hallo"}), encoding="utf-8")
    return Translator(tmp_path, "en")


def test_translate_with_scope(translator):
    """Test that scope is prefixed to the key"""
    assert translator.t("notice", scope="posts.create", title="Hi") == "Post Hi created."
    assert translator.t("notice", scope=["posts", "create"], title="Hi") == "Post Hi created."
    assert translator.t("posts.create.notice", title="Hi") == "Post Hi created."


def test_translate_keeps_unknown_placeholders(translator):
    assert translator.t("posts.create.notice") == "Post %{title} created."


def test_translate_html_key_escapes_values(translator):
    """Test that _html keys return markup and escape interpolated values"""
    result = translator.t("posts.create.notice_html", title="<script>")

    assert isinstance(result, Markup)
    assert result == "Post <b>&lt;script&gt;</b> created."


def test_translate_missing_key(translator):
    assert translator.t("missing", scope="posts") == "translation missing: en.posts.missing"
    # A key pointing at a subtree is not a translation either
    assert translator.t("posts.create") == "translation missing: en.posts.create"


def test_translate_other_locale(translator):
    assert translator.t("greeting", locale="de") == "Hallo"
    assert translator.t("greeting", locale="xx") == "translation missing: xx.greeting"


def test_translator_store_merges(translator):
    translator.store("en", {"posts": {"create": {"alert": "Nope"}}})

    assert translator.t("posts.create.alert") == "Nope"
    assert translator.t("posts.create.notice", title="x") == "Post x created."


def test_get_translator_uses_fixture_locales():
    assert get_translator().t("posts.create.notice") == "Post created."
    assert get_translator().t("posts.create.notice", locale="fr") == "Article créé."


def test_reload_drops_stored_translations(translator):
    translator.store("en", {"greeting": "Hi there"})
    assert translator.t("greeting") == "Hi there"

    translator.reload()
    assert translator.t("greeting") == "Hello"


def test_translate_accepts_reserved_placeholder_names(translator):
    translator.store("en", {"moved": "Moved to %{scope} in %{locale}"})

    assert translator.translate("moved", {"scope": "drafts", "locale": "fr"}) == "Moved to drafts in fr"
    assert translator.translate("greeting") == "Hello"
