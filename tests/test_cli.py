# tests/test_cli.py
import json
import os

from ledger_gateway.cli.cli import CLI

class TestCLI:
    def write_config(self, temp_dir, db_path):
        path = os.path.join(temp_dir, "gateway.yaml")
        with open(path, "w") as f:
            f.write(f"storage:\n  db_path: {db_path}\n")
        return path

    def test_status_prints_snapshot(self, database, db_path, temp_dir, capsys):
        config_path = self.write_config(temp_dir, db_path)

        assert CLI().main(["--config", config_path, "status"]) == 0

        status = json.loads(capsys.readouterr().out)
        assert status["last_committed"] == 3
        assert status["last_verified"] == 1
        assert status["outstanding_txs"] == 2

    def test_status_with_unopenable_storage(self, temp_dir, capsys):
        blocker = os.path.join(temp_dir, "not_a_dir")
        with open(blocker, "w") as f:
            f.write("")
        config_path = self.write_config(temp_dir, os.path.join(blocker, "ledger.db"))

        assert CLI().main(["--config", config_path, "status"]) == 1
        assert "unavailable" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert CLI().main([]) == 2
        assert "serve" in capsys.readouterr().out

    def test_thread_failure_stops_server(self):
        cli = CLI()
        cli.server = type("Server", (), {"should_exit": False})()
        cli.on_thread_failure(None)
        assert cli.failed
        assert cli.server.should_exit
