"""
Tests end-to-end de la CLI.

Flux complet : ligne de commande -> bootstrap -> dispatcher ->
subscribers -> repository SQLAlchemy (SQLite en mémoire).
"""

import pytest
from click.testing import CliRunner

from vending.entrypoints.cli import cli


@pytest.fixture
def runner(monkeypatch):
    for name in (
        "VENDING_DATABASE_URI",
        "VENDING_MACHINE_IDS",
        "VENDING_INITIAL_STOCK",
        "VENDING_ISOLATE_FAILURES",
        "VENDING_LOG_LEVEL",
        "VENDING_ALERT_DESTINATION",
    ):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


class TestSimulate:
    def test_scénario_vente_puis_réapprovisionnement(self, runner):
        result = runner.invoke(
            cli, ["simulate", "--event", "sale:001:8", "--event", "refill:001:5"]
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "001\t7\tok" in lines
        assert "002\t10\tok" in lines
        assert "003\t10\tok" in lines

    def test_stock_bas_affiché(self, runner):
        result = runner.invoke(cli, ["simulate", "--event", "sale:002:9"])

        assert result.exit_code == 0, result.output
        assert "002\t1\tlow" in result.output.splitlines()

    def test_events_aléatoires(self, runner):
        result = runner.invoke(cli, ["simulate", "--count", "5", "--seed", "1"])

        assert result.exit_code == 0, result.output
        ids = [line.split("\t")[0] for line in result.output.splitlines() if "\t" in line]
        assert ids == ["001", "002", "003"]

    def test_machine_inconnue(self, runner):
        result = runner.invoke(cli, ["simulate", "--event", "sale:999:1"])

        assert result.exit_code == 1
        assert "999" in result.output

    def test_machine_inconnue_isolée(self, runner):
        result = runner.invoke(
            cli, ["simulate", "--isolate-failures", "--event", "sale:999:1"]
        )

        assert result.exit_code == 0, result.output
        assert "001\t10\tok" in result.output.splitlines()

    def test_description_invalide(self, runner):
        result = runner.invoke(cli, ["simulate", "--event", "sale:001"])

        assert result.exit_code == 2

    def test_machines_configurées(self, runner, monkeypatch):
        monkeypatch.setenv("VENDING_MACHINE_IDS", "A1,B2")
        monkeypatch.setenv("VENDING_INITIAL_STOCK", "4")

        result = runner.invoke(cli, ["machines"])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[-2:] == ["A1\t4", "B2\t4"]


class TestConfiguration:
    def test_stock_initial_invalide(self, runner, monkeypatch):
        monkeypatch.setenv("VENDING_INITIAL_STOCK", "dix")

        result = runner.invoke(cli, ["machines"])

        assert result.exit_code == 2
        assert "initial_stock" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_isolation_par_variable_d_environnement(self, runner, monkeypatch):
        monkeypatch.setenv("VENDING_ISOLATE_FAILURES", "true")

        result = runner.invoke(cli, ["simulate", "--event", "sale:999:1"])

        assert result.exit_code == 0, result.output

    def test_option_prioritaire_sur_l_environnement(self, runner, monkeypatch):
        monkeypatch.setenv("VENDING_ISOLATE_FAILURES", "true")

        result = runner.invoke(
            cli, ["simulate", "--propagate-failures", "--event", "sale:999:1"]
        )

        assert result.exit_code == 1
