"""
Tests for anchor discovery in page content.
"""

from __future__ import annotations

import pytest

from src.components.toolbar import GetAnchorsInput, parse_page_id, run_get_anchors, scan_anchors
from src.domain.entities import Page
from src.domain.errors import PageNotFoundError, PermissionDeniedError
from src.domain.policy import PolicyEngine


class TestScanAnchors:
    def test_name_and_id_attributes(self) -> None:
        html = '<h2 id="intro">Intro</h2><p><a name="details">Details</a></p>'
        assert scan_anchors(html) == ["intro", "details"]

    def test_single_quotes_and_unquoted(self) -> None:
        html = "<a name='one'>1</a><a name=two>2</a><div id=three class=x>3</div>"
        assert scan_anchors(html) == ["one", "two", "three"]

    def test_unquoted_value_stops_at_tag_end(self) -> None:
        assert scan_anchors("<a name=top>Top</a>") == ["top"]

    def test_distinct_in_document_order(self) -> None:
        html = '<a id="b"></a><a id="a"></a><a name="b"></a>'
        assert scan_anchors(html) == ["b", "a"]

    def test_case_insensitive_attribute_names(self) -> None:
        assert scan_anchors('<A NAME="Upper"></A><p ID="p1"></p>') == ["Upper", "p1"]

    def test_attribute_across_lines(self) -> None:
        assert scan_anchors('<div\n  id="multi"\n>x</div>') == ["multi"]

    def test_empty_values_dropped(self) -> None:
        assert scan_anchors('<a name="">x</a><a id=""></a>') == []

    def test_other_attributes_ignored(self) -> None:
        assert scan_anchors('<img data-id="1" src="a.png"><p grid="g" valid="v">t</p>') == []

    @pytest.mark.parametrize("content", ["", None, "<p>No anchors</p>"])
    def test_nothing_found(self, content) -> None:
        assert scan_anchors(content) == []


class TestParsePageId:
    @pytest.mark.parametrize("value,expected", [("5", 5), (5, 5), (None, None), ("abc", None), ("", None)])
    def test_values(self, value, expected) -> None:
        assert parse_page_id(value) == expected


class TestRunGetAnchors:
    @pytest.fixture
    def policy(self, rules) -> PolicyEngine:
        return PolicyEngine(rules)

    @pytest.fixture
    def pages(self, page_repo):
        page_repo.add(Page(id=1, title="Home", content='<h2 id="welcome">Hi</h2>'))
        page_repo.add(Page(id=2, title="Members", content='<a name="secret"></a>', visibility="logged_in"))
        page_repo.add(Page(id=3, title="Board", content='<a name="minutes"></a>', visibility="restricted"))
        return page_repo

    def test_public_page_for_anonymous(self, pages, policy) -> None:
        out = run_get_anchors(GetAnchorsInput(page_id="1"), pages=pages, policy=policy, user=None)

        assert out.success
        assert out.page_id == 1
        assert out.anchors == ["welcome"]

    def test_unknown_page(self, pages, policy) -> None:
        with pytest.raises(PageNotFoundError) as exc:
            run_get_anchors(GetAnchorsInput(page_id=99), pages=pages, policy=policy, user=None)
        assert exc.value.message == "Target page not found."
        assert exc.value.status_code == 404

    @pytest.mark.parametrize("page_id", [None, "abc"])
    def test_missing_or_invalid_id(self, pages, policy, page_id) -> None:
        with pytest.raises(PageNotFoundError):
            run_get_anchors(GetAnchorsInput(page_id=page_id), pages=pages, policy=policy, user=None)

    def test_logged_in_page_denied_to_anonymous(self, pages, policy) -> None:
        with pytest.raises(PermissionDeniedError) as exc:
            run_get_anchors(GetAnchorsInput(page_id=2), pages=pages, policy=policy, user=None)
        assert exc.value.status_code == 403
        assert exc.value.message == "You are not permitted to access the content of the target page."

    def test_logged_in_page_for_user(self, pages, policy, viewer_user) -> None:
        out = run_get_anchors(GetAnchorsInput(page_id=2), pages=pages, policy=policy, user=viewer_user)
        assert out.anchors == ["secret"]

    def test_restricted_page_needs_view_permission(self, pages, policy, editor_user) -> None:
        out = run_get_anchors(GetAnchorsInput(page_id=3), pages=pages, policy=policy, user=editor_user)
        assert out.anchors == ["minutes"]

    def test_disabled_user_denied(self, pages, policy, editor_user) -> None:
        editor_user.status = "disabled"
        with pytest.raises(PermissionDeniedError):
            run_get_anchors(GetAnchorsInput(page_id=2), pages=pages, policy=policy, user=editor_user)
