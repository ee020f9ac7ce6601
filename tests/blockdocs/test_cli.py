from click.testing import CliRunner

from blockdocs.cli import cli


class TestCli:

    def test_commands(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ["db", "projects", "export", "serve"]:
            assert command in result.output

    def test_db_create(self):
        """Should create the tables on the testing database and exit cleanly."""
        result = CliRunner().invoke(cli, ["db", "create", "--env", "testing"])
        assert result.exit_code == 0, result.output

    def test_rejects_unknown_env(self):
        result = CliRunner().invoke(cli, ["export", "1", "--env", "nowhere"])
        assert result.exit_code == 2
