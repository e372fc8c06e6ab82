"""Tests for the run context."""

import io
import logging

from modmake.build.run_context import Run


class TestRun:
    """Test logging threshold and sink routing."""

    def test_info_goes_to_out_and_warning_to_err(self):
        out, err = io.StringIO(), io.StringIO()
        run = Run(logging.INFO, out, err)

        run.log(logging.INFO, "Building %d module(s)", 2)
        run.log(logging.WARNING, "Source path of %s realm not found", "test")
        run.log(logging.ERROR, "Build failed: %s", "boom")

        assert out.getvalue() == "Building 2 module(s)\n"
        assert err.getvalue() == (
            "Source path of test realm not found\nBuild failed: boom\n"
        )

    def test_threshold_suppresses_debug(self):
        out, err = io.StringIO(), io.StringIO()
        run = Run.create(False, out, err)

        run.log(logging.DEBUG, "hidden")

        assert out.getvalue() == ""
        assert run.threshold == logging.INFO

    def test_debug_threshold(self):
        out, err = io.StringIO(), io.StringIO()
        run = Run.create(True, out, err)

        run.log(logging.DEBUG, "shown")

        assert out.getvalue() == "shown\n"
        assert run.threshold == logging.DEBUG

    def test_runs_do_not_share_sinks(self):
        first_out, second_out = io.StringIO(), io.StringIO()
        first = Run(logging.INFO, first_out, io.StringIO())
        Run(logging.INFO, second_out, io.StringIO())

        first.log(logging.INFO, "only first")

        assert first_out.getvalue() == "only first\n"
        assert second_out.getvalue() == ""

    def test_duration_millis(self):
        run = Run(logging.INFO, io.StringIO(), io.StringIO())

        assert run.duration_millis() >= 0
