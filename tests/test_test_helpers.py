"""
Tests for the model and controller assertion helpers themselves
"""
import pytest

from minimalizer.testing import ControllerTestHelpers, ModelTestHelpers
from tests.sample_app import CommentsController, Post, PostsController


class TestModelTestHelpers(ModelTestHelpers):

    def test_assert_errors_passes_for_blank(self):
        self.assert_errors("title", Post(), {"error": "blank"})

    def test_assert_errors_fails_without_errors(self):
        with pytest.raises(AssertionError, match="Expected title to have errors; found none."):
            self.assert_errors("title", Post(title="Fine"))

    def test_assert_errors_fails_for_other_code(self):
        with pytest.raises(AssertionError, match=r"include error taken; found \['blank'\]"):
            self.assert_errors("title", Post(), {"error": "taken"})

    def test_assert_errors_fails_for_detail_mismatch(self):
        with pytest.raises(AssertionError, match="Expected error details to include"):
            self.assert_errors("title", Post(title="x" * 101), {"error": "too_long", "count": 5})

    def test_refute_errors_fails_with_errors(self):
        with pytest.raises(AssertionError, match="Expected title to have no errors"):
            self.refute_errors("title", Post())

    def test_validation_context_scopes_and_clears(self):
        post = Post(title="Draft")

        with self.validation_context("publish"):
            self.assert_errors("body", post, "blank")

        assert self._validation_context is None
        self.assert_no_errors("body", post)

    def test_validation_context_clears_after_failure(self):
        with pytest.raises(AssertionError):
            with self.validation_context("publish"):
                self.refute_errors("body", Post(title="Draft"))

        assert self._validation_context is None

    def test_nested_validation_context_does_not_stack(self):
        post = Post(title="Draft")

        with self.validation_context("publish"):
            with self.validation_context("update"):
                self.refute_errors("body", post)
            # the inner block cleared the context
            self.refute_errors("body", post)

    def test_explicit_context_wins(self):
        with self.validation_context("update"):
            self.assert_errors("body", Post(title="Draft"), "blank", context="publish")


class TestControllerTestHelpers(ControllerTestHelpers):

    def test_local_translation_scope(self, db, post):
        self.process(CommentsController, "pin", post, post, db=db, method="GET")
        assert self.local_translation_scope() == "admin.comments.pin"

    def test_build_request(self):
        request = self.build_request("post", "/posts", session={"a": 1}, headers={"X-Test": "yes"})

        assert request.method == "POST"
        assert request.url.path == "/posts"
        assert request.session == {"a": 1}
        assert request.headers["x-test"] == "yes"

    def test_assert_redirect_reports_wrong_location(self, db, post):
        self.process(PostsController, "update", post, {"title": "Renamed"}, db=db)

        with pytest.raises(AssertionError, match="but was a redirect to"):
            self.assert_redirect("/elsewhere")
        with pytest.raises(AssertionError, match="Expected response to be a <303>"):
            self.assert_redirect(post, status=303)

    def test_assert_redirect_on_render(self, db):
        self.process(PostsController, "create", {"title": ""}, db=db)

        with pytest.raises(AssertionError, match="but was a <422>"):
            self.assert_redirect("/posts")

    def test_assert_render_reports_wrong_template(self, db):
        self.process(PostsController, "create", {"title": ""}, db=db)

        with pytest.raises(AssertionError, match="Expected template <posts/edit.html>"):
            self.assert_render("edit", status=422)
        with pytest.raises(AssertionError, match="Expected response to be a <200>"):
            self.assert_render("new")

    def test_assert_flash_mismatch(self, db, post):
        self.process(PostsController, "update", post, {"title": "Renamed"}, db=db)

        with pytest.raises(AssertionError, match="Expected flash notice"):
            self.assert_flash("notice", "alert")
