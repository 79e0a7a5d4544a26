from json import loads
from unittest.mock import patch

from click.testing import CliRunner

from tdswinners.cli.winners import winners_cmd


def _args(ledger, ids, *extra):
    return [
        "--ledger",
        str(ledger),
        "--baseline-validator",
        str(ids.baseline),
        "--bootstrap-leader",
        str(ids.bootstrap),
        *extra,
    ]


def test_winners_json_output(fake_ledger_dir, ids, fake_settings):
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(winners_cmd, _args(fake_ledger_dir, ids, "--json"))

    assert result.exit_code == 0, result.output
    reports = loads(result.output)
    assert [r["category"] for r in reports] == [
        "Rewards Earned",
        "Availability",
        "Confirmation Latency",
    ]
    rewards = reports[0]["winners"]
    assert [(w["identity"], w["metric_value"]) for w in rewards] == [
        (str(ids.a), 500),
        (str(ids.b), -100),
    ]
    latency = reports[2]["winners"]
    assert [w["identity"] for w in latency] == [str(ids.a), str(ids.b)]


def test_winners_top_and_final_slot(fake_ledger_dir, ids, fake_settings):
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(
            winners_cmd,
            _args(fake_ledger_dir, ids, "--json", "--top", "1", "--final-slot", "4"),
        )

    assert result.exit_code == 0, result.output
    reports = loads(result.output)
    assert all(len(r["winners"]) == 1 for r in reports)
    assert reports[0]["winners"][0]["metric_value"] == 0


def test_winners_table_output(fake_ledger_dir, ids, fake_settings):
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(winners_cmd, _args(fake_ledger_dir, ids))

    assert result.exit_code == 0, result.output
    assert "Processing ledger" in result.output
    assert "Rewards Earned" in result.output
    assert "Confirmation Latency" in result.output


def test_winners_rejects_bad_pubkey(fake_ledger_dir, ids, fake_settings):
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(
            winners_cmd,
            [
                "--ledger",
                str(fake_ledger_dir),
                "--baseline-validator",
                "nope",
                "--bootstrap-leader",
                str(ids.bootstrap),
            ],
        )

    assert result.exit_code == 1
    assert "Failed to create a valid pubkey" in result.output


def test_winners_requires_ledger(ids, fake_settings):
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(
            winners_cmd,
            [
                "--baseline-validator",
                str(ids.baseline),
                "--bootstrap-leader",
                str(ids.bootstrap),
            ],
        )

    assert result.exit_code == 1
    assert "--ledger is required" in result.output


def test_winners_missing_ledger_dir(tmp_path, ids, fake_settings):
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(winners_cmd, _args(tmp_path / "missing", ids))

    assert result.exit_code == 1
    assert "Failed to open ledger" in result.output


def test_winners_settings_supply_defaults(fake_ledger_dir, ids, fake_settings):
    fake_settings.TDS_LEDGER_PATH = fake_ledger_dir
    fake_settings.TDS_BASELINE_VALIDATOR = str(ids.baseline)
    fake_settings.TDS_BOOTSTRAP_LEADER = str(ids.bootstrap)
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(winners_cmd, ["--json"])

    assert result.exit_code == 0, result.output
    assert len(loads(result.output)) == 3


def test_winners_ledger_with_invalid_utf8(fake_ledger_dir, ids, fake_settings):
    with (fake_ledger_dir / "entries.jsonl").open("ab") as f:
        f.write(b"\xff\xfe\n")
    runner = CliRunner()
    with patch("tdswinners.cli.winners.get_settings", return_value=fake_settings):
        result = runner.invoke(winners_cmd, _args(fake_ledger_dir, ids))

    assert result.exit_code == 1
    assert "Failed to open ledger" in result.output
