#!/usr/bin/env python3
import io
import json
import os
import tempfile
from contextlib import redirect_stderr

import pytest

from lsystem_engine.cli import main

_EXAMPLE_DIR = os.path.join(os.path.dirname(__file__), "example")


class TestCLI:
    def test_run_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        algae = os.path.join(_EXAMPLE_DIR, "algae.json")
        assert main(["run", algae]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "0: A"
        assert lines[-1] == "5: ABAABABAABAAB"
        assert len(lines) == 6

    def test_run_overrides_iterations(self, capsys: pytest.CaptureFixture[str]) -> None:
        algae = os.path.join(_EXAMPLE_DIR, "algae.json")
        assert main(["run", algae, "--iterations", "2"]) == 0
        assert capsys.readouterr().out.splitlines()[-1] == "2: ABA"

    def test_run_with_seed_is_repeatable(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        weed = os.path.join(_EXAMPLE_DIR, "branching_weed.json")
        assert main(["run", weed, "--seed", "3"]) == 0
        first = capsys.readouterr().out
        assert main(["run", weed, "--seed", "3"]) == 0
        assert capsys.readouterr().out == first

    def test_validate_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        weed = os.path.join(_EXAMPLE_DIR, "branching_weed.json")
        assert main(["validate", weed]) == 0
        out = capsys.readouterr().out
        assert "name: Branching weed" in out
        assert "productions: 3" in out
        assert "A < B > A -> B[A]" in out

    def test_demo_parametric(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["demo", "parametric", "--iterations", "3"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "0: A",
            "1: F(1)?P(0, 1)-A",
            "2: F(2)?P(0, 2)-F(1)?P(1, 2)-A",
            "3: F(3)?P(0, 3)-F(2)?P(2, 3)-F(1)?P(2, 2)-A",
        ]

    def test_demo_context_sensitive(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["demo", "context-sensitive", "--seed", "1"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "0: A(1)B(2)A(3)"
        assert len(lines) == 4

    def test_verbose_flag(self) -> None:
        assert main(["-v", "demo", "parametric", "--iterations", "1"]) == 0

    def test_negative_iterations_returns_error_code(self) -> None:
        with redirect_stderr(io.StringIO()) as err:
            assert main(["demo", "parametric", "--iterations", "-1"]) == 2
        assert "Config error" in err.getvalue()

    def test_file_not_found_returns_error_code(self) -> None:
        with redirect_stderr(io.StringIO()) as err:
            assert main(["run", "nonexistent_grammar.json"]) == 2
        assert "File error" in err.getvalue()

    def test_invalid_config_returns_error_code(self) -> None:
        with tempfile.NamedTemporaryFile(suffix=".json", mode="w", delete=False) as tmp:
            json.dump({"axiom": "A", "iterations": "bad"}, tmp)
            tmp_path = tmp.name
        try:
            with redirect_stderr(io.StringIO()):
                assert main(["validate", tmp_path]) == 2
        finally:
            os.unlink(tmp_path)

    def test_unknown_demo_exits(self) -> None:
        with redirect_stderr(io.StringIO()):
            with pytest.raises(SystemExit):
                main(["demo", "koch"])
