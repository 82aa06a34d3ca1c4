"""
Module: test_cli.py
Description: Unit tests for the sparkle-relay command line.
"""

from urllib.parse import parse_qsl

import pytest

from sparkle_relay.cli import main, read_transcript
from sparkle_relay.models.message import MessageKind


@pytest.fixture
def configured(monkeypatch, target_url):
    monkeypatch.setenv("SPARKLE_ROOM_NAME", "lobby")
    monkeypatch.setenv("SPARKLE_TARGET_URL", target_url)


def forms(httpx_mock):
    return [
        dict(parse_qsl(request.content.decode("ascii")))
        for request in httpx_mock.get_requests()
    ]


class TestSend:

    def test_missing_configuration(self, capsys):
        assert main(["send", "--body", "hi"]) == 1
        assert "configuration missing" in capsys.readouterr().err

    def test_send_success(self, configured, target_url, httpx_mock, capsys):
        httpx_mock.add_response(method="POST", url=target_url, status_code=200)

        assert main(["--user", "alice", "send", "--id", "1", "--body", "hi"]) == 0

        form = forms(httpx_mock)[0]
        assert form["ID"] == "1"
        assert form["From"] == "alice"
        assert form["Room"] == "lobby"
        assert "0 still buffered" in capsys.readouterr().out

    def test_send_failure_leaves_message_buffered(self, configured, target_url, httpx_mock):
        httpx_mock.add_response(method="POST", url=target_url, status_code=503)

        assert main(["send", "--body", "hi"]) == 2

    def test_groupchat_sender(self, configured, target_url, httpx_mock):
        httpx_mock.add_response(method="POST", url=target_url)

        main(["send", "--body", "hi", "--from", "lobby@conf/bob", "--groupchat"])

        assert forms(httpx_mock)[0]["From"] == "bob"

    def test_user_defaults_to_login_name(self, configured, target_url, httpx_mock, monkeypatch):
        monkeypatch.setattr("sparkle_relay.cli.getpass.getuser", lambda: "carol")
        httpx_mock.add_response(method="POST", url=target_url)

        main(["send", "--body", "hi"])

        assert forms(httpx_mock)[0]["From"] == "carol"

    def test_missing_login_name(self, configured, target_url, httpx_mock, monkeypatch):
        def no_login():
            raise OSError("No username set in the environment")

        monkeypatch.setattr("sparkle_relay.cli.getpass.getuser", no_login)
        httpx_mock.add_response(method="POST", url=target_url)

        assert main(["send", "--body", "hi"]) == 0
        assert forms(httpx_mock)[0]["From"] == "unknown"

    def test_explicit_user_skips_login_lookup(self, configured, target_url, httpx_mock, monkeypatch):
        def no_login():
            raise KeyError("getpwuid(): uid not found")

        monkeypatch.setattr("sparkle_relay.cli.getpass.getuser", no_login)
        httpx_mock.add_response(method="POST", url=target_url)

        assert main(["--user", "dave", "send", "--body", "hi"]) == 0
        assert forms(httpx_mock)[0]["From"] == "dave"

    def test_overrides(self, httpx_mock):
        url = "http://override.test/log"
        httpx_mock.add_response(method="POST", url=url)

        assert main(["--room", "den", "--url", url, "send", "--body", "hi"]) == 0
        assert forms(httpx_mock)[0]["Room"] == "den"


class TestReplay:

    def test_read_transcript(self, tmp_path):
        path = tmp_path / "transcript"
        path.write_bytes(b"1:alice:hi\r\n2:bob:time is 10:30\r\n\r\n")

        messages = read_transcript(path, "lobby")

        assert [m.message_id for m in messages] == ["1", "2"]
        assert messages[1].body == "time is 10:30"
        assert messages[1].origin == "lobby/bob"
        assert messages[1].kind is MessageKind.GROUPCHAT

    def test_replay_posts_each_line(self, configured, target_url, httpx_mock, tmp_path):
        path = tmp_path / "transcript"
        path.write_bytes(b"1:alice:hi\r\n2:bob:hello\r\n")
        httpx_mock.add_response(method="POST", url=target_url)
        httpx_mock.add_response(method="POST", url=target_url)

        assert main(["replay", str(path)]) == 0

        sent = forms(httpx_mock)
        assert [f["ID"] for f in sent] == ["1", "2"]
        assert [f["From"] for f in sent] == ["alice", "bob"]

    def test_replay_missing_file(self, configured, tmp_path):
        assert main(["replay", str(tmp_path / "missing")]) == 1

    def test_replay_malformed_file(self, configured, tmp_path):
        path = tmp_path / "transcript"
        path.write_text("not a transcript line\n")

        assert main(["replay", str(path)]) == 1
