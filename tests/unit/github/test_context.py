"""Tests for event context loading."""

import json
from unittest.mock import Mock

import pytest

from prbranch.github.context import (
    DEFAULT_BRANCH_PREFIX,
    ActionInputs,
    ConfigurationError,
    EventContext,
    PullRequestState,
    build_context,
    context_from_environment,
    load_event,
    parse_bool,
)
from prbranch.github.pull_requests import PullRequestDetails

REPO = {"full_name": "octocat/hello-world"}


@pytest.fixture
def fetch_pr():
    return Mock(
        return_value=PullRequestDetails(
            number=5, state="OPEN", head_ref="feature/x", base_ref="main", commit_count=3
        )
    )


class TestPullRequestState:
    @pytest.mark.parametrize("raw", ["OPEN", "open", " Open "])
    def test_parse_open(self, raw):
        assert PullRequestState.parse(raw) is PullRequestState.OPEN

    def test_parse_unknown(self):
        with pytest.raises(ConfigurationError, match="Unknown pull request state"):
            PullRequestState.parse("DRAFT")


class TestEventContext:
    def test_is_immutable(self):
        context = EventContext(repository="octocat/hello-world", entity_number=1, is_pr=False)
        with pytest.raises(AttributeError):
            context.entity_number = 2  # type: ignore[misc]


class TestActionInputs:
    def test_defaults(self):
        inputs = ActionInputs.from_env({})
        assert inputs.base_branch is None
        assert inputs.branch_prefix == DEFAULT_BRANCH_PREFIX
        assert inputs.use_commit_signing is False

    def test_reads_inputs(self):
        inputs = ActionInputs.from_env(
            {
                "INPUT_BASE_BRANCH": "develop",
                "INPUT_BRANCH_PREFIX": "bot-",
                "INPUT_USE_COMMIT_SIGNING": "true",
            }
        )
        assert inputs.base_branch == "develop"
        assert inputs.branch_prefix == "bot-"
        assert inputs.use_commit_signing is True

    def test_blank_base_branch_is_none(self):
        assert ActionInputs.from_env({"INPUT_BASE_BRANCH": "  "}).base_branch is None

    def test_empty_prefix_is_kept(self):
        assert ActionInputs.from_env({"INPUT_BRANCH_PREFIX": ""}).branch_prefix == ""

    def test_invalid_boolean(self):
        with pytest.raises(ConfigurationError, match="use_commit_signing"):
            ActionInputs.from_env({"INPUT_USE_COMMIT_SIGNING": "maybe"})


@pytest.mark.parametrize(
    "raw,expected",
    [("true", True), ("TRUE", True), ("1", True), ("yes", True), ("false", False), ("", False)],
)
def test_parse_bool(raw, expected):
    assert parse_bool(raw, "flag") is expected


class TestLoadEvent:
    def test_issues_event(self):
        payload = {"repository": REPO, "issue": {"number": 7}}
        assert load_event("issues", payload) == ("octocat/hello-world", 7, False)

    def test_issue_comment_on_issue(self):
        payload = {"repository": REPO, "issue": {"number": 7}, "comment": {"id": 1}}
        assert load_event("issue_comment", payload) == ("octocat/hello-world", 7, False)

    def test_issue_comment_on_pull_request(self):
        payload = {
            "repository": REPO,
            "issue": {"number": 8, "pull_request": {"url": "https://api.github.com/x"}},
        }
        assert load_event("issue_comment", payload) == ("octocat/hello-world", 8, True)

    @pytest.mark.parametrize(
        "event_name",
        ["pull_request", "pull_request_target", "pull_request_review", "pull_request_review_comment"],
    )
    def test_pull_request_events(self, event_name):
        payload = {"repository": REPO, "pull_request": {"number": 9}}
        assert load_event(event_name, payload) == ("octocat/hello-world", 9, True)

    def test_unsupported_event(self):
        with pytest.raises(ConfigurationError, match="Unsupported event: push"):
            load_event("push", {"repository": REPO})

    def test_malformed_payload(self):
        with pytest.raises(ConfigurationError, match="Malformed issues payload"):
            load_event("issues", {"repository": REPO})


class TestBuildContext:
    def test_issue_context_does_not_fetch_pr(self, fetch_pr):
        inputs = ActionInputs(base_branch="develop", branch_prefix="bot-", use_commit_signing=True)

        context = build_context("octocat/hello-world", 7, False, inputs, fetch_pr)

        fetch_pr.assert_not_called()
        assert context == EventContext(
            repository="octocat/hello-world",
            entity_number=7,
            is_pr=False,
            branch_prefix="bot-",
            base_branch="develop",
            use_commit_signing=True,
        )

    def test_pr_context_includes_details(self, fetch_pr):
        context = build_context("octocat/hello-world", 5, True, ActionInputs(), fetch_pr)

        fetch_pr.assert_called_once_with("octocat/hello-world", 5)
        assert context.pr_state is PullRequestState.OPEN
        assert context.head_ref == "feature/x"
        assert context.base_ref == "main"
        assert context.commit_count == 3

    @pytest.mark.parametrize("repo", ["octocat", "octocat/", "/hello", "a/b/c", ""])
    def test_invalid_repository(self, repo, fetch_pr):
        with pytest.raises(ConfigurationError, match="Invalid repository format"):
            build_context(repo, 1, False, ActionInputs(), fetch_pr)

    def test_invalid_number(self, fetch_pr):
        with pytest.raises(ConfigurationError, match="Invalid issue or pull request number"):
            build_context("octocat/hello-world", 0, False, ActionInputs(), fetch_pr)


class TestContextFromEnvironment:
    def test_reads_event_file_and_inputs(self, tmp_path, fetch_pr):
        event_file = tmp_path / "event.json"
        event_file.write_text(json.dumps({"repository": REPO, "issue": {"number": 7}}))
        environ = {
            "GITHUB_EVENT_NAME": "issues",
            "GITHUB_EVENT_PATH": str(event_file),
            "INPUT_BRANCH_PREFIX": "bot-",
        }

        context = context_from_environment(environ, fetch_pr)

        assert context.entity_number == 7
        assert context.is_pr is False
        assert context.branch_prefix == "bot-"

    def test_explicit_inputs_override_environment(self, tmp_path, fetch_pr):
        event_file = tmp_path / "event.json"
        event_file.write_text(json.dumps({"repository": REPO, "pull_request": {"number": 5}}))
        environ = {
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_EVENT_PATH": str(event_file),
            "INPUT_BRANCH_PREFIX": "bot-",
        }

        context = context_from_environment(
            environ, fetch_pr, inputs=ActionInputs(branch_prefix="other/")
        )

        assert context.is_pr is True
        assert context.branch_prefix == "other/"

    def test_missing_environment(self, fetch_pr):
        with pytest.raises(ConfigurationError, match="GITHUB_EVENT_NAME"):
            context_from_environment({}, fetch_pr)

    def test_missing_event_file(self, tmp_path, fetch_pr):
        environ = {
            "GITHUB_EVENT_NAME": "issues",
            "GITHUB_EVENT_PATH": str(tmp_path / "missing.json"),
        }
        with pytest.raises(ConfigurationError, match="Event payload not found"):
            context_from_environment(environ, fetch_pr)

    def test_invalid_event_json(self, tmp_path, fetch_pr):
        event_file = tmp_path / "event.json"
        event_file.write_text("{not json")
        environ = {"GITHUB_EVENT_NAME": "issues", "GITHUB_EVENT_PATH": str(event_file)}

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            context_from_environment(environ, fetch_pr)
