"""Tests for the submission and feedback intake rules."""

import pytest

from app.core.errors import ConflictError, ErrorReason, NotFoundError, ValidationError
from app.schemas.feedback import FeedbackCreate
from app.schemas.submission import SubmissionCreate
from app.services.feedback import FeedbackFilter, FeedbackManager
from app.services.intake_validation import (
    FeedbackValidator,
    SubmissionValidator,
    contains_blocked_words,
    sanitize_content,
)
from app.services.submissions import SubmissionManager


def reason_of(exc_info):
    return exc_info.value.reason


def submission(**overrides):
    values = {
        "category": "Libraries",
        "title": "Map library",
        "description": "Scanned campus maps back to 1900",
        "url": "https://maps.campus.edu",
    }
    values.update(overrides)
    return SubmissionCreate(**values)


def feedback(**overrides):
    values = {
        "type": "feature",
        "title": "Dark mode please",
        "content": "The directory is hard to read at night.",
    }
    values.update(overrides)
    return FeedbackCreate(**values)


@pytest.mark.unit
class TestSanitize:
    def test_strips_script_elements(self):
        assert sanitize_content("Hi <script>alert(1)</script>there") == "Hi there"

    def test_strips_inline_handlers_and_js_urls(self):
        cleaned = sanitize_content('<a onclick="x" href="javascript:go()">link</a>')
        assert "onclick" not in cleaned
        assert "javascript:" not in cleaned
        assert "link" in cleaned

    def test_words_containing_on_are_kept(self):
        assert sanitize_content("button=primary") == "button=primary"

    def test_strict_mode_covers_more_markup(self):
        text = '<embed src="x"></embed>vbscript:ok'
        assert sanitize_content(text) == text
        assert sanitize_content(text, strict=True) == "ok"

    def test_blocked_words_are_case_insensitive(self):
        assert contains_blocked_words("Great SPAM offer", ["spam"])
        assert not contains_blocked_words("Study rooms", ["spam"])


@pytest.mark.unit
class TestSubmissionValidator:
    def test_prepare_cleans_values(self):
        values = SubmissionValidator().prepare(
            submission(
                category=" Libraries ",
                title="  Map library <script>x()</script>",
                submitted_by="  ",
            )
        )

        assert values == {
            "category": "Libraries",
            "title": "Map library",
            "description": "Scanned campus maps back to 1900",
            "url": "https://maps.campus.edu",
            "submitted_by": None,
        }

    @pytest.mark.parametrize("field", ["category", "title", "description", "url"])
    def test_missing_field(self, field):
        with pytest.raises(ValidationError) as exc_info:
            SubmissionValidator().prepare(submission(**{field: " "}))
        assert reason_of(exc_info) == ErrorReason.MISSING_FIELDS

    @pytest.mark.parametrize("url", ["maps.campus.edu", "ftp://maps.campus.edu"])
    def test_url_must_be_http(self, url):
        with pytest.raises(ValidationError) as exc_info:
            SubmissionValidator().prepare(submission(url=url))
        assert reason_of(exc_info) == ErrorReason.INVALID_URL

    def test_length_limits(self):
        with pytest.raises(ValidationError) as exc_info:
            SubmissionValidator().prepare(submission(title="x" * 101))
        assert reason_of(exc_info) == ErrorReason.FIELD_TOO_LONG

        with pytest.raises(ValidationError) as exc_info:
            SubmissionValidator().prepare(submission(description="x" * 501))
        assert reason_of(exc_info) == ErrorReason.FIELD_TOO_LONG

    def test_markup_only_title_is_missing(self):
        with pytest.raises(ValidationError) as exc_info:
            SubmissionValidator().prepare(submission(title="<script>x()</script>"))
        assert reason_of(exc_info) == ErrorReason.MISSING_FIELDS

    def test_blocked_words(self):
        with pytest.raises(ValidationError) as exc_info:
            SubmissionValidator().prepare(submission(description="See example.com"))
        assert reason_of(exc_info) == ErrorReason.BLOCKED_CONTENT


@pytest.mark.unit
class TestFeedbackValidator:
    def test_bug_reports_are_high_priority(self):
        values = FeedbackValidator().prepare(feedback(type="bug"))
        assert values["priority"] == "high"
        assert values["status"] == "open"

    def test_other_types_are_normal_priority(self):
        values = FeedbackValidator().prepare(feedback(type=" Improvement "))
        assert values["type"] == "improvement"
        assert values["priority"] == "normal"

    def test_unknown_type(self):
        with pytest.raises(ValidationError) as exc_info:
            FeedbackValidator().prepare(feedback(type="complaint"))
        assert reason_of(exc_info) == ErrorReason.INVALID_FEEDBACK_TYPE

    def test_minimum_lengths_apply_after_cleaning(self):
        with pytest.raises(ValidationError) as exc_info:
            FeedbackValidator().prepare(feedback(title="Hey <script>x</script>"))
        assert reason_of(exc_info) == ErrorReason.FIELD_TOO_SHORT

        with pytest.raises(ValidationError) as exc_info:
            FeedbackValidator().prepare(feedback(content="Too short"))
        assert reason_of(exc_info) == ErrorReason.FIELD_TOO_SHORT

    def test_content_limit(self):
        with pytest.raises(ValidationError) as exc_info:
            FeedbackValidator().prepare(feedback(content="x" * 1001))
        assert reason_of(exc_info) == ErrorReason.FIELD_TOO_LONG

    def test_blocked_words(self):
        with pytest.raises(ValidationError) as exc_info:
            FeedbackValidator().prepare(feedback(content="Buy now and get more rooms"))
        assert reason_of(exc_info) == ErrorReason.BLOCKED_CONTENT

    def test_update_requires_a_valid_field(self):
        with pytest.raises(ValidationError) as exc_info:
            FeedbackValidator().prepare_update({"status": None})
        assert reason_of(exc_info) == ErrorReason.EMPTY_UPDATE

    def test_update_rejects_unknown_priority(self):
        with pytest.raises(ValidationError) as exc_info:
            FeedbackValidator().prepare_update({"priority": "asap"})
        assert reason_of(exc_info) == ErrorReason.INVALID_PRIORITY

    def test_update_cleans_reply_and_tags(self):
        changes = FeedbackValidator().prepare_update(
            {"admin_reply": "Fixed <script>x</script>", "tags": ["ui", " ", "night "]}
        )
        assert changes == {"admin_reply": "Fixed", "tags": ["ui", "night"]}


@pytest.mark.unit
class TestSubmissionManager:
    def test_submit_stores_pending(self, db_session):
        created = SubmissionManager(db_session).submit(submission(), submitted_ip="10.0.0.1")

        assert created.status.value == "pending"
        assert created.submitted_ip == "10.0.0.1"

    @pytest.mark.parametrize(
        "overrides",
        [{"url": "https://other.campus.edu"}, {"title": "Another map archive"}],
    )
    def test_same_title_or_url_is_duplicate(self, db_session, overrides):
        manager = SubmissionManager(db_session)
        manager.submit(submission())

        with pytest.raises(ConflictError) as exc_info:
            manager.submit(submission(**overrides))
        assert reason_of(exc_info) == ErrorReason.DUPLICATE_SUBMISSION

    def test_list_and_review(self, db_session):
        manager = SubmissionManager(db_session)
        first = manager.submit(submission())
        manager.submit(submission(title="Print credits", url="https://print.campus.edu"))

        manager.set_status(first.id, "approved")

        approved, total = manager.list("approved")
        assert [s.id for s in approved] == [first.id]
        assert total == 1
        assert manager.list("all")[1] == 2
        assert manager.list(None)[1] == 2

    def test_review_errors(self, db_session):
        manager = SubmissionManager(db_session)
        created = manager.submit(submission())

        with pytest.raises(ValidationError) as exc_info:
            manager.set_status(created.id, "archived")
        assert reason_of(exc_info) == ErrorReason.INVALID_STATUS

        with pytest.raises(NotFoundError):
            manager.set_status("missing", "approved")

        with pytest.raises(ValidationError):
            manager.list("archived")


@pytest.mark.unit
class TestFeedbackManager:
    def test_list_orders_by_priority(self, db_session):
        manager = FeedbackManager(db_session)
        idea = manager.submit(feedback())
        bug = manager.submit(feedback(type="bug", title="Search is broken"))
        other = manager.submit(feedback(type="other", title="Kind words"))
        manager.update(other.id, {"priority": "urgent"})

        items, total = manager.list()

        assert [f.id for f in items] == [other.id, bug.id, idea.id]
        assert total == 3

    def test_list_filters(self, db_session):
        manager = FeedbackManager(db_session)
        manager.submit(feedback())
        bug = manager.submit(feedback(type="bug", title="Search is broken"))

        items, _ = manager.list(FeedbackFilter(type="bug"))
        assert [f.id for f in items] == [bug.id]

        items, _ = manager.list(FeedbackFilter(priority="normal", status="open"))
        assert len(items) == 1

        with pytest.raises(ValidationError) as exc_info:
            manager.list(FeedbackFilter(priority="asap"))
        assert reason_of(exc_info) == ErrorReason.INVALID_PRIORITY

    def test_stats_are_zero_filled(self, db_session):
        manager = FeedbackManager(db_session)
        manager.submit(feedback(type="bug", title="Search is broken"))

        stats = manager.stats()

        assert stats.total == 1
        assert stats.by_type == {"bug": 1, "feature": 0, "improvement": 0, "other": 0}
        assert stats.by_priority["high"] == 1
        assert stats.by_status == {
            "open": 1,
            "in_progress": 0,
            "resolved": 0,
            "closed": 0,
        }

    def test_update_unknown_feedback(self, db_session):
        with pytest.raises(NotFoundError):
            FeedbackManager(db_session).update("missing", {"status": "closed"})
