"""Command-line entry point: input parsing, exit codes and output."""

import json

import httpx
import pytest

from structgen.cli import main, parse_inputs

pytestmark = pytest.mark.unit


class TestParseInputs:
    def test_plain_values(self):
        assert parse_inputs(["topic=Online learning", "mode=grammar_doctor"]) == {
            "topic": "Online learning",
            "mode": "grammar_doctor",
        }

    def test_value_may_contain_equals(self):
        assert parse_inputs(["sentence=a=b"]) == {"sentence": "a=b"}

    def test_json_values_are_decoded(self):
        parsed = parse_inputs(['body=["one", "two"]', 'meta={"a": 1}'])
        assert parsed == {"body": ["one", "two"], "meta": {"a": 1}}

    def test_invalid_json_stays_text(self):
        assert parse_inputs(["idea=[draft"]) == {"idea": "[draft"}

    def test_file_values(self, tmp_path):
        essay = tmp_path / "essay.txt"
        essay.write_text("我的作文 in English.", encoding="utf-8")

        assert parse_inputs([f"essay=@{essay}"]) == {"essay": "我的作文 in English."}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="Cannot read essay"):
            parse_inputs([f"essay=@{tmp_path / 'nope.txt'}"])

    @pytest.mark.parametrize("pair", ["topic", "=value"])
    def test_malformed_pair(self, pair):
        with pytest.raises(ValueError, match="Expected key=value"):
            parse_inputs([pair])


class TestMain:
    def test_missing_credential_exits_2(self, capsys):
        assert main(["brainstorm", "topic=Remote work"]) == 2
        assert "API key missing" in capsys.readouterr().err

    def test_missing_input_exits_2(self, monkeypatch, capsys):
        monkeypatch.setenv("STRUCTGEN_API_KEY", "k")

        assert main(["validate-idea", "topic=t"]) == 2
        assert "missing required input" in capsys.readouterr().err

    def test_unknown_operation_is_rejected_by_argparse(self):
        with pytest.raises(SystemExit) as exc:
            main(["essay-magic"])
        assert exc.value.code == 2

    def test_malformed_input_is_a_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            main(["brainstorm", "topic"])
        assert exc.value.code == 2

    def test_successful_run_prints_json(self, monkeypatch, capsys, mock_http, openai_reply):
        cards = [{"dimension": "成本", "dimensionEn": "Cost", "id": "1"}]
        transport, handler = mock_http(
            lambda req: httpx.Response(200, json=openai_reply(json.dumps({"cards": cards})))
        )
        monkeypatch.setattr(
            "structgen.adapters.registry.HttpTransport", lambda timeout: transport
        )
        monkeypatch.setenv("STRUCTGEN_API_KEY", "k")

        code = main(["brainstorm", "topic=Remote work", "--provider", "deepseek"])

        captured = capsys.readouterr()
        assert code == 0
        assert handler.calls == 1
        data = json.loads(captured.out)
        assert data["cards"][0]["dimension"] == "成本"
        assert "成本" in captured.out
        assert captured.err == ""

    def test_degraded_run_warns_on_stderr(self, monkeypatch, capsys, mock_http):
        transport, _ = mock_http(lambda req: httpx.Response(500, text="boom"))
        monkeypatch.setattr(
            "structgen.adapters.registry.HttpTransport", lambda timeout: transport
        )
        monkeypatch.setenv("STRUCTGEN_API_KEY", "k")

        code = main(["brainstorm", "topic=Remote work"])

        captured = capsys.readouterr()
        assert code == 0
        assert json.loads(captured.out) == {"cards": []}
        assert "degraded result, defaults used for: cards" in captured.err
