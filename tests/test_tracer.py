"""Tests for the tracer module."""

import numpy as np
import pytest


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from stringtrace.tracer import summarize

        summary = summarize(np.zeros((64, 48), dtype=np.uint8))

        assert "ndarray" in summary
        assert "64x48" in summary
        assert "uint8" in summary

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from stringtrace.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}
        assert len(summarize(large_dict, max_len=40)) <= 40

    def test_short_numeric_tuple(self):
        """Chords are printed as-is."""
        from stringtrace.tracer import summarize

        assert summarize((3, 17)) == "(3, 17)"

    def test_long_list_summary(self):
        from stringtrace.tracer import summarize

        summary = summarize(list(range(50)))
        assert "list" in summary
        assert "len=50" in summary

    def test_long_string_summary(self):
        from stringtrace.tracer import summarize

        summary = summarize("a" * 1000)
        assert "len=1000" in summary

    def test_none_summary(self):
        from stringtrace.tracer import summarize

        assert summarize(None) == "None"

    def test_pydantic_model_summary(self):
        """Test Pydantic model summarization."""
        from stringtrace.models import Settings
        from stringtrace.tracer import summarize

        assert "Settings" in summarize(Settings())

    def test_session_summary(self, small_settings, disc_target):
        from stringtrace.core.builder import new_session
        from stringtrace.tracer import summarize

        session = new_session(small_settings, disc_target)
        summary = summarize(session)

        assert summary.startswith("TraceSession(")
        assert "chords=0" in summary
        assert "Canvas(64x64" in summarize(session.canvas)


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that spans produce start/end lines and indentation."""
        from stringtrace.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        try:
            with tracer.span("outer", module="test"):
                with tracer.span("inner", module="test"):
                    tracer.event("inside")
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")
        assert len(lines) == 5
        assert "test:inner" in lines[1]
        assert "    test:inner  inside" in lines[2]

    def test_span_failure_logged(self, capsys):
        from stringtrace.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        try:
            with pytest.raises(RuntimeError):
                with tracer.span("boom", module="test"):
                    raise RuntimeError("bad")
            # The stack unwinds so later events are not attributed to the failed span
            tracer.event("after")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "ERROR" in err
        assert "RuntimeError: bad" in err
        assert "test:boom  after" not in err

    def test_level_filtering(self, capsys):
        from stringtrace.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()
        try:
            tracer.event("hidden", level="DEBUG")
            tracer.event("shown", level="WARN")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_file_and_json_output(self, temp_dir, capsys):
        import json
        import os

        from stringtrace.tracer import configure_tracer, get_tracer

        path = os.path.join(temp_dir, "trace.log")
        configure_tracer(enabled=True, level="INFO", file_path=path, json_output=True)
        tracer = get_tracer()
        try:
            tracer.event("hello", chord=(1, 2))
        finally:
            configure_tracer(enabled=False)

        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().strip().split("\n")
        assert "hello" in lines[0]
        record = json.loads(lines[1])
        assert record["message"] == "hello chord=(1, 2)"
        assert record["meta"] == {"chord": "(1, 2)"}

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from stringtrace.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        from stringtrace.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_logs_when_enabled(self, capsys):
        from stringtrace.tracer import configure_tracer, trace

        @trace(label="double", arg_names=["x"])
        def double(x):
            return x * 2

        configure_tracer(enabled=True)
        try:
            assert double(x=4) == 8
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "double  start x=4" in err
        assert "end ok" in err

    def test_decorator_with_exception(self):
        from stringtrace.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()
