"""Integration tests for assembling the command tree and running it."""

from dataclasses import replace

import pytest

from gitlfs.cli.main import EXIT_FAILURE, EXIT_SUCCESS, Runner
from gitlfs.lib.config import version_description
from gitlfs.lib.exceptions import LFSError
from gitlfs.lib.manpages import MAN_PAGES

ROOT_PAGE = MAN_PAGES["git-lfs"].strip()


@pytest.fixture
def runner(registry, api_client, git_dir):
    """A runner using a fresh registry and a recording API client."""
    return Runner(registry=registry, api_client_factory=lambda settings: api_client)


@pytest.fixture
def calls():
    return []


def log_files(git_dir):
    return sorted((git_dir / "lfs" / "logs" / "http").glob("http-*.log"))


class TestRootCommand:
    """Tests for running with no subcommand."""

    def test_prints_version_and_usage(self, runner, capsys):
        code = runner.run([])

        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert out.startswith(version_description() + "\n")
        assert ROOT_PAGE in out

    @pytest.mark.parametrize("flag", ["-v", "--version"])
    def test_version_flag_skips_usage(self, runner, capsys, flag):
        code = runner.run([flag])

        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out == version_description() + "\n"

    def test_help_flag(self, runner, capsys):
        code = runner.run(["--help"])

        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == ROOT_PAGE


class TestRegisteredCommands:
    """Tests for realizing and dispatching registered commands."""

    def test_tree_contains_non_skipped_commands_in_order(self, runner, registry):
        registry.register("push", lambda args: None)
        registry.register("experimental", lambda args: None, lambda spec: None)
        registry.register("pull", lambda args: None)

        runner.run(["push"])

        names = [spec.name for spec in runner.state.tree.commands if not spec.hidden]
        assert names == ["completion", "help", "push", "pull"]

    def test_successful_command(self, runner, registry, api_client, calls):
        registry.register("push", lambda args: calls.append(args.command_spec.name))

        code = runner.run(["push"])

        assert code == EXIT_SUCCESS
        assert calls == ["push"]
        assert api_client.close_calls == 1

    def test_command_flags_via_customize(self, runner, registry, calls):
        def customize(spec):
            def add_arguments(parser):
                parser.add_argument("--dry-run", action="store_true")

            return replace(spec, add_arguments=add_arguments)

        registry.register("push", lambda args: calls.append(args.dry_run), customize)

        assert runner.run(["push", "--dry-run"]) == EXIT_SUCCESS
        assert calls == [True]

    def test_failing_command(self, runner, registry, api_client, capsys):
        def fail(args):
            raise RuntimeError("object not found")

        registry.register("fetch", fail)

        code = runner.run(["fetch"])

        assert code == EXIT_FAILURE
        assert "Error: object not found" in capsys.readouterr().err
        assert api_client.close_calls == 1

    def test_failing_command_with_lfs_error(self, runner, registry, capsys):
        def fail(args):
            raise LFSError("not in a git repository")

        registry.register("status", fail)

        assert runner.run(["status"]) == EXIT_FAILURE
        assert "Error: not in a git repository" in capsys.readouterr().err

    def test_unknown_command(self, runner, api_client, capsys):
        code = runner.run(["nonexistent"])

        captured = capsys.readouterr()
        assert code == EXIT_FAILURE
        assert 'Error: unknown command "nonexistent" for "git-lfs"' in captured.err
        assert "__complete" not in captured.err
        assert ROOT_PAGE in captured.out
        assert api_client.close_calls == 1

    def test_bad_flag_prints_command_usage(self, runner, registry, capsys):
        registry.register("prune", lambda args: None)

        code = runner.run(["prune", "--no-such-flag"])

        assert code == EXIT_FAILURE
        assert "Error:" in capsys.readouterr().err

    def test_undocumented_command_help(self, runner, registry, capsys):
        registry.register("prune", lambda args: None)

        code = runner.run(["prune", "--help"])

        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == 'Sorry, no usage text found for "prune"'

    def test_registry_is_realized_once(self, runner, registry, api_client, capsys):
        registry.register("push", lambda args: None)
        runner.run(["push"])

        code = runner.run(["push"])

        assert code == EXIT_FAILURE
        assert "already realized" in capsys.readouterr().err
        assert api_client.close_calls == 2

    def test_settings_loaded_after_canonicalization(
        self, registry, api_client, tmp_path, monkeypatch
    ):
        (tmp_path / "work" / ".git").mkdir(parents=True)
        monkeypatch.chdir(tmp_path / "work")
        monkeypatch.setenv("GIT_DIR", ".git")
        seen = []
        runner = Runner(
            registry=registry,
            api_client_factory=lambda settings: seen.append(settings) or api_client,
        )

        runner.run(["--version"])

        assert seen[0].local_git_dir.is_absolute()


class TestHelpCommand:
    """Tests for the help subcommand."""

    def test_no_topic_prints_root(self, runner, capsys):
        assert runner.run(["help"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == ROOT_PAGE

    def test_command_topic(self, runner, capsys):
        assert runner.run(["help", "completion"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == MAN_PAGES["completion"].strip()

    @pytest.mark.parametrize("topic", ["config", "faq"])
    def test_alias_topics(self, runner, capsys, topic):
        assert runner.run(["help", topic]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == MAN_PAGES[topic].strip()

    def test_unknown_topic(self, runner, capsys):
        code = runner.run(["help", "nonexistent", "topic"])

        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert out.startswith("Unknown help topic [`nonexistent` `topic`]\n")
        assert ROOT_PAGE in out


class TestCompletionCommand:
    """Tests for the completion subcommand."""

    def test_bash(self, runner, capsys):
        assert runner.run(["completion", "bash"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.endswith("_git_lfs() { __start_git-lfs; }\n")

    def test_zsh(self, runner, capsys):
        assert runner.run(["completion", "zsh"]) == EXIT_SUCCESS
        assert 'requestComp="git-${words[1]#*git-}' in capsys.readouterr().out

    def test_unsupported_shell(self, runner, capsys):
        code = runner.run(["completion", "cobol"])

        captured = capsys.readouterr()
        assert code == EXIT_FAILURE
        assert "Error:" in captured.err
        assert "__start_git-lfs" not in captured.out
        assert captured.out.strip() == MAN_PAGES["completion"].strip()

    def test_missing_shell(self, runner):
        assert runner.run(["completion"]) == EXIT_FAILURE

    def test_completion_protocol_lists_commands(self, runner, registry, capsys):
        registry.register("push", lambda args: None, lambda spec: replace(spec, short_help="Push objects"))

        assert runner.run(["__complete", ""]) == EXIT_SUCCESS
        assert capsys.readouterr().out == (
            "completion\tGenerate completion script\n"
            "help\tHelp about any command\n"
            "push\tPush objects\n"
            ":4\n"
        )

    def test_completion_protocol_flags(self, runner, capsys):
        assert runner.run(["__completeNoDesc", "--ver"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "--version\n:4\n"


class TestDiagnostics:
    """Tests for HTTP statistics logging around subcommands."""

    def test_disabled_creates_nothing(self, runner, registry, api_client, git_dir):
        registry.register("push", lambda args: None)

        assert runner.run(["push"]) == EXIT_SUCCESS
        assert log_files(git_dir) == []
        assert api_client.sinks == []

    def test_enabled_attaches_sink_before_body(
        self, runner, registry, api_client, git_dir, monkeypatch, calls
    ):
        monkeypatch.setenv("GIT_LOG_STATS", "1")
        registry.register("push", lambda args: calls.append(len(api_client.sinks)))

        assert runner.run(["push"]) == EXIT_SUCCESS
        assert calls == [1]
        assert len(log_files(git_dir)) == 1

    def test_root_command_has_no_hook(self, runner, api_client, git_dir, monkeypatch):
        monkeypatch.setenv("GIT_LOG_STATS", "1")

        assert runner.run([]) == EXIT_SUCCESS
        assert log_files(git_dir) == []
        assert api_client.sinks == []

    def test_fixed_commands_have_no_hook(self, runner, api_client, git_dir, monkeypatch):
        monkeypatch.setenv("GIT_LOG_STATS", "1")

        assert runner.run(["help"]) == EXIT_SUCCESS
        assert runner.state.tree.get("help").pre_run is None
        assert log_files(git_dir) == []

    def test_command_can_opt_out(self, runner, registry, api_client, git_dir, monkeypatch):
        monkeypatch.setenv("GIT_LOG_STATS", "1")
        registry.register("ls-files", lambda args: None, lambda spec: replace(spec, pre_run=None))

        assert runner.run(["ls-files"]) == EXIT_SUCCESS
        assert log_files(git_dir) == []

    def test_hook_failure_does_not_fail_command(
        self, runner, registry, git_dir, monkeypatch, capsys, calls
    ):
        monkeypatch.setenv("GIT_LOG_STATS", "1")
        (git_dir / "lfs").write_text("not a directory")
        registry.register("push", lambda args: calls.append("ran"))

        assert runner.run(["push"]) == EXIT_SUCCESS
        assert calls == ["ran"]
        assert "Error logging HTTP stats:" in capsys.readouterr().err


class TestStartupFailures:
    """Tests for failures before any command runs."""

    def test_invalid_setting(self, runner, api_client, monkeypatch, capsys):
        monkeypatch.setenv("GIT_LFS_HTTP_TIMEOUT", "abc")

        code = runner.run(["help"])

        captured = capsys.readouterr()
        assert code == EXIT_FAILURE
        assert "Error: invalid configuration for GIT_LFS_HTTP_TIMEOUT" in captured.err
        assert captured.out == ""
        assert api_client.close_calls == 0

    def test_settings_factory_error(self, registry, api_client, capsys):
        def broken_settings():
            raise OSError("permission denied")

        runner = Runner(
            registry=registry,
            settings_factory=broken_settings,
            api_client_factory=lambda settings: api_client,
        )

        assert runner.run(["help"]) == EXIT_FAILURE
        assert "Error: permission denied" in capsys.readouterr().err
        assert api_client.close_calls == 0

    def test_api_client_factory_error(self, registry, git_dir, capsys):
        def broken_client(settings):
            raise LFSError("no endpoint configured")

        runner = Runner(registry=registry, api_client_factory=broken_client)

        assert runner.run(["version"]) == EXIT_FAILURE
        assert "Error: no endpoint configured" in capsys.readouterr().err
