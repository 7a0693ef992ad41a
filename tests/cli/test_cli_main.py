"""Tests for the perfbench command line."""

import os.path
import textwrap

import pytest

from perfbench.cli import BenchmarkCLI, load_target, main

CANDIDATES = textwrap.dedent(
    """
    def fast():
        return 1


    def slow():
        return sum(range(200))
    """
)


@pytest.fixture
def candidates_file(tmp_path):
    path = tmp_path / "candidates.py"
    path.write_text(CANDIDATES)
    return str(path)


class TestLoadTarget:
    """Resolving TARGET arguments."""

    def test_module_target(self):
        function, title = load_target("os.path:join")
        assert function is os.path.join
        assert title is None

    def test_title_suffix(self):
        function, title = load_target("os.path:basename=base")
        assert function is os.path.basename
        assert title == "base"

    def test_file_target(self, candidates_file):
        function, title = load_target(f"{candidates_file}:slow")
        assert function() == sum(range(200))

    def test_malformed_target(self):
        with pytest.raises(ValueError, match="module:function"):
            load_target("os.path")

    def test_non_callable_target(self):
        with pytest.raises(ValueError, match="not callable"):
            load_target("os.path:sep")


class TestBenchmarkCLI:
    """Argument parsing."""

    def test_defaults(self):
        args = BenchmarkCLI("x").add_display_args().add_logging_args().parse(["m:f"])
        assert args.iterations == 100_000
        assert args.factor is None
        assert args.warmup == 10
        assert args.rounds == 1
        assert args.filter_outliers is False
        assert args.verbose == 0

    def test_iterations_and_factor_are_exclusive(self):
        cli = BenchmarkCLI("x")
        with pytest.raises(SystemExit):
            cli.parse(["m:f", "-n", "5", "--factor", "2"])


class TestMain:
    """End-to-end runs through main()."""

    def test_run_prints_rounds_totals_and_placements(self, candidates_file, capsys):
        code = main(
            [
                f"{candidates_file}:fast",
                f"{candidates_file}:slow=slowpoke",
                "-n", "20",
                "-w", "2",
                "-r", "2",
                "--placements",
                "--no-func-result",
            ]
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "Round 1:" in out
        assert "Round 2:" in out
        assert "Totals (2 Tests, 2 Rounds):" in out
        assert "slowpoke:" in out
        assert "Placements:" in out

    def test_log_file(self, candidates_file, tmp_path, capsys):
        log_file = tmp_path / "run.log"
        main([f"{candidates_file}:fast", "-n", "5", "-w", "2", "--log-file", str(log_file), "-vv"])
        content = log_file.read_text()
        assert content.startswith("=== perfbench run ")
        assert "preparing 1 tests for 5 iterations..." in content
        assert "round 1 done" in content

    def test_bad_target_exits_with_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["no_such_module_xyz:f"])
        assert exc_info.value.code == 2

    def test_invalid_config_exits_with_usage_error(self, candidates_file, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([f"{candidates_file}:fast", "-n", "0"])
        assert exc_info.value.code == 2
