"""Tests for fetching review comments."""

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest
import requests

from suggestion_patcher.github_client import (
    CommentFetchError,
    GitHubClient,
    load_comments_file,
    resolve_repo,
)


def _response(payload, links=None, status_error=None):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.links = links or {}
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    return resp


class TestFetchReviewComments:
    def test_single_page(self):
        session = MagicMock()
        session.get.return_value = _response([{"id": 1}, {"id": 2}])
        client = GitHubClient("octo/widgets", token="t0k", session=session)

        comments = client.fetch_review_comments(5)

        assert [c["id"] for c in comments] == [1, 2]
        url = session.get.call_args[0][0]
        kwargs = session.get.call_args[1]
        assert url == "https://api.github.com/repos/octo/widgets/pulls/5/comments"
        assert kwargs["params"] == {"per_page": 100}
        assert kwargs["headers"]["Authorization"] == "Bearer t0k"

    def test_follows_pagination(self):
        next_url = "https://api.github.com/repositories/9/pulls/5/comments?page=2"
        session = MagicMock()
        session.get.side_effect = [
            _response([{"id": 1}], links={"next": {"url": next_url}}),
            _response([{"id": 2}]),
        ]
        client = GitHubClient("octo/widgets", session=session)

        comments = client.fetch_review_comments(5)

        assert [c["id"] for c in comments] == [1, 2]
        second = session.get.call_args_list[1]
        assert second[0][0] == next_url
        assert second[1]["params"] is None

    def test_no_token_no_auth_header(self):
        session = MagicMock()
        session.get.return_value = _response([])
        GitHubClient("o/r", session=session).fetch_review_comments(1)
        assert "Authorization" not in session.get.call_args[1]["headers"]

    def test_custom_api_url(self):
        session = MagicMock()
        session.get.return_value = _response([])
        GitHubClient("o/r", api_url="https://ghe.local/api/v3/",
                     session=session).fetch_review_comments(3)
        assert session.get.call_args[0][0] == (
            "https://ghe.local/api/v3/repos/o/r/pulls/3/comments")

    def test_http_error(self):
        session = MagicMock()
        session.get.return_value = _response(
            None, status_error=requests.HTTPError("404 Not Found"))
        with pytest.raises(CommentFetchError, match="404"):
            GitHubClient("o/r", session=session).fetch_review_comments(1)

    def test_connection_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(CommentFetchError) as exc_info:
            GitHubClient("o/r", session=session).fetch_review_comments(1)
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_malformed_json(self):
        resp = _response(None)
        resp.json.side_effect = ValueError("Expecting value")
        session = MagicMock()
        session.get.return_value = resp
        with pytest.raises(CommentFetchError, match="Malformed"):
            GitHubClient("o/r", session=session).fetch_review_comments(1)

    def test_unexpected_payload(self):
        session = MagicMock()
        session.get.return_value = _response({"message": "Bad credentials"})
        with pytest.raises(CommentFetchError, match="Unexpected"):
            GitHubClient("o/r", session=session).fetch_review_comments(1)


class TestResolveRepo:
    def test_explicit(self):
        assert resolve_repo("octo/widgets") == "octo/widgets"

    @pytest.mark.parametrize("value", ["widgets", "a/b/c", "/widgets"])
    def test_explicit_invalid(self, value):
        with pytest.raises(CommentFetchError):
            resolve_repo(value)

    def test_prefers_gh(self):
        with patch("suggestion_patcher.git_utils.gh_repo_slug",
                   return_value="gh/repo"), \
             patch("suggestion_patcher.git_utils.get_remote_url") as remote:
            assert resolve_repo() == "gh/repo"
        remote.assert_not_called()

    def test_falls_back_to_remote(self):
        with patch("suggestion_patcher.git_utils.gh_repo_slug",
                   return_value=None), \
             patch("suggestion_patcher.git_utils.get_remote_url",
                   return_value="git@github.com:octo/widgets.git"):
            assert resolve_repo() == "octo/widgets"

    def test_nothing_found(self):
        with patch("suggestion_patcher.git_utils.gh_repo_slug",
                   return_value=None), \
             patch("suggestion_patcher.git_utils.get_remote_url",
                   return_value=None):
            with pytest.raises(CommentFetchError, match="--repo"):
                resolve_repo()

    def test_remote_lookup_runs_only_gh_and_git_remote(self):
        results = [
            subprocess.CompletedProcess([], 1, "", "gh: not logged in"),
            subprocess.CompletedProcess(
                [], 0, "https://github.com/octo/widgets.git\n", ""),
        ]
        with patch("suggestion_patcher.git_utils.subprocess.run",
                   side_effect=results) as run:
            assert resolve_repo(cwd="/work") == "octo/widgets"

        commands = [c.args[0] for c in run.call_args_list]
        assert commands == [
            ["gh", "repo", "view", "--json", "owner,name"],
            ["git", "remote", "get-url", "origin"],
        ]


class TestLoadCommentsFile:
    def test_reads_list(self, tmp_path):
        path = tmp_path / "comments.json"
        path.write_text(json.dumps([{"id": 1}]), encoding="utf-8")
        assert load_comments_file(str(path)) == [{"id": 1}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CommentFetchError):
            load_comments_file(str(tmp_path / "nope.json"))

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "comments.json"
        path.write_text('{"id": 1}', encoding="utf-8")
        with pytest.raises(CommentFetchError, match="JSON list"):
            load_comments_file(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "comments.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CommentFetchError):
            load_comments_file(str(path))
