"""Tests for the command-line interface."""

import json
import logging

import pytest

from prime_sum.cli import main


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("prime_sum").handlers.clear()


class TestSearchCommand:
    """Tests for the search sub-command."""

    def test_fast_search(self, capsys):
        assert main(["search", "--max", "40", "--fast", "--threads", "2"]) == 0
        out = capsys.readouterr().out
        assert "n=20" in out
        assert "p1=3 p2=17" in out
        assert "19/19 sizes succeeded" in out

    def test_backtracking_with_show(self, capsys):
        assert main(["search", "--max", "10", "--start", "10", "--show"]) == 0
        out = capsys.readouterr().out
        assert "1-2-3-4-7-6-5-8-9-10" in out

    def test_failure_exit_code(self, capsys):
        assert main(["search", "--max", "6", "--start", "2", "--fast"]) == 1
        assert "Failed sizes: 2" in capsys.readouterr().out

    def test_configuration_error(self, capsys):
        assert main(["search", "--max", "10", "--start", "3"]) == 2
        assert "even" in capsys.readouterr().err
        assert main(["search", "--max", "10", "--threads", "0"]) == 2

    def test_save(self, tmp_path, capsys):
        assert main(["search", "--max", "12", "--fast", "--save", "--output-dir", str(tmp_path)]) == 0
        runs = list((tmp_path / "runs").iterdir())
        assert len(runs) == 1
        results = json.loads((runs[0] / "results.json").read_text())
        assert results["success"] is True
        assert "Results saved to" in capsys.readouterr().out

    def test_save_marks_aborted_run_failed(self, tmp_path, monkeypatch):
        """A run that raises is recorded as failed, not left running."""
        from prime_sum.pipeline.scheduler import WorkScheduler
        from prime_sum.utils.run_manager import RunManager

        def broken_run(self):
            raise RuntimeError("worker crashed")

        monkeypatch.setattr(WorkScheduler, "run", broken_run)
        with pytest.raises(RuntimeError, match="worker crashed"):
            main(["search", "--max", "12", "--fast", "--save", "--output-dir", str(tmp_path)])

        run = RunManager(tmp_path).get_latest_run()
        assert run.metadata.status == "failed"
        assert run.metadata.completed_at is not None
        assert "worker crashed" in run.metadata.summary["error"]
        assert "Run aborted" in (run.logs_dir / "run.log").read_text()


class TestSingleSizeCommands:
    """Tests for path, cycle and matrix."""

    def test_path(self, capsys):
        assert main(["path", "-n", "6"]) == 0
        assert capsys.readouterr().out.strip() == "1-4-3-2-5-6"

    def test_path_without_cycle(self, capsys):
        assert main(["path", "-n", "5", "--no-cycle"]) == 0
        assert capsys.readouterr().out.strip() == "1-4-3-2-5"

    def test_odd_cycle_not_found(self, capsys):
        assert main(["path", "-n", "5"]) == 1
        assert "No prime sum cycle" in capsys.readouterr().out

    def test_cycle_verify(self, capsys):
        assert main(["cycle", "-n", "20", "--verify", "--quiet"]) == 0
        out = capsys.readouterr().out
        assert "p1=3 p2=17" in out
        assert "20 vertices, 0 non-prime sums" in out

    def test_cycle_streams_vertices(self, capsys):
        assert main(["cycle", "-n", "4"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["p1=1 p2=3", "1", "4", "3", "2"]

    def test_cycle_rejects_odd_size(self, capsys):
        assert main(["cycle", "-n", "7"]) == 2

    def test_matrix(self, capsys):
        assert main(["matrix", "-n", "6"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "0, 1, 0, 1, 0, 1"
        assert "Degrees: [3, 3, 2, 2, 2, 2]" in out


class TestRunsCommand:
    """Tests for the runs sub-command."""

    def test_empty(self, tmp_path, capsys):
        assert main(["runs", "--output-dir", str(tmp_path)]) == 0
        assert "No runs found" in capsys.readouterr().out

    def test_list_and_cleanup(self, tmp_path, capsys):
        base = str(tmp_path)
        main(["search", "--max", "6", "--start", "2", "--fast", "--save", "--output-dir", base])
        capsys.readouterr()

        assert main(["runs", "--output-dir", base]) == 0
        out = capsys.readouterr().out
        assert "fast" in out
        assert "failed sizes: [2]" in out
        assert "Total: 1 runs shown" in out

        assert main(["runs", "--output-dir", base, "--cleanup", "--keep", "0", "--force"]) == 0
        assert "Deleted 1 runs" in capsys.readouterr().out
        assert list((tmp_path / "runs").iterdir()) == []


def test_no_command(capsys):
    assert main([]) == 1
