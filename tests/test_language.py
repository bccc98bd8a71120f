import pytest

from navwarn_s124.language import desc_for, html_to_text, is_blank, resolve_desc
from navwarn_s124.model import MessageDesc

DESCS = [MessageDesc("da", "Dansk"), MessageDesc("en", "English")]


@pytest.mark.parametrize(
    "lang,expected",
    [("da", "Dansk"), ("DA", "Dansk"), (" da ", "Dansk"), ("en", "English"), ("de", "English"), (None, "English")],
)
def test_resolve_desc(lang, expected):
    assert resolve_desc(DESCS, lang).title == expected


def test_resolve_desc_without_match():
    assert resolve_desc([MessageDesc("fr", "Français")], "de") is None
    assert resolve_desc([], "en") is None


def test_desc_for_is_exact():
    assert desc_for(DESCS, "de") is None
    assert desc_for(DESCS, "da").title == "Dansk"


@pytest.mark.parametrize(
    "html,expected",
    [
        ("<p>This is <strong>HTML</strong> content.</p>", "This is HTML content."),
        ("<p>Line one</p><p>Line two</p>", "Line one Line two"),
        ("first<br>second", "first second"),
        ("Fish &amp; chips &lt;3", "Fish & chips <3"),
        ("<ul><li>a</li><li>b</li></ul>", "a b"),
        ("Plain text  kept   as is", "Plain text  kept   as is"),
        ("", ""),
        (None, None),
    ],
)
def test_html_to_text(html, expected):
    assert html_to_text(html) == expected


def test_is_blank():
    assert is_blank(None)
    assert is_blank(" \n")
    assert not is_blank(" x ")


def test_desc_language_code_case_is_ignored():
    descs = [MessageDesc("EN", "English"), MessageDesc("Da", "Dansk")]
    assert desc_for(descs, "da").title == "Dansk"
    assert resolve_desc(descs, "fr").title == "English"
