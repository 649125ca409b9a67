import io

import pytest
import torch
from pydantic import ValidationError

from torch_qprojector.core import rules
from torch_qprojector.diagnostics import TraceConfig, TraceLog, check, run_trace
from torch_qprojector.diagnostics.cli import main


def _trace(rule, **kwargs) -> list[str]:
    stream = io.StringIO()
    check(TraceLog(stream, precision=2), rule, TraceConfig(**kwargs))
    return stream.getvalue().splitlines()


def test_trace_log_prefix_stack():
    stream = io.StringIO()
    log = TraceLog(stream, precision=3)
    log.write()
    with log.push("a"):
        with log.push("b"):
            log.write("x")
        log.write(log.number(2.0 / 3.0))
    log.write(log.point(torch.tensor([0.5, -1.0, 100.0])))
    assert stream.getvalue().splitlines() == [
        "DEAL::",
        "DEAL:a:b::x",
        "DEAL:a::0.667",
        "DEAL::0.5 -1 100",
    ]


def test_number_format_matches_printf_g():
    log = TraceLog(io.StringIO(), precision=2)
    assert log.number(14.142135623730951) == "14"
    assert log.number(0.1127) == "0.11"
    assert log.number(100.0) == "1e+02"
    assert log.number(0.0) == "0"


def test_midpoint_line_section():
    lines = _trace(rules.midpoint())
    assert lines[:7] == [
        "DEAL::",
        "DEAL:line::0\t4",
        "DEAL:line::length: 6",
        "DEAL:line::0\t4 -1",
        "DEAL:line::length: 10",
        "DEAL:line::0\t4 -1 5",
        "DEAL:line::length: 14",
    ]
    assert len(lines) == 144


def test_midpoint_face_section():
    lines = _trace(rules.midpoint(), dimensions=(1, 2), all_face_dimensions=())
    face = [line for line in lines if line.startswith("DEAL:face::")]
    assert face[:9] == [
        "DEAL:face::Checking dim 1 1d-points 1",
        "DEAL:face::Face 0",
        "DEAL:face::0",
        "DEAL:face::Face 1",
        "DEAL:face::1",
        "DEAL:face::Face 0 subface 0",
        "DEAL:face::0",
        "DEAL:face::Face 1 subface 0",
        "DEAL:face::1",
    ]
    assert face[9:18] == [
        "DEAL:face::Checking dim 2 1d-points 1",
        "DEAL:face::Face 0",
        "DEAL:face::0 0.5",
        "DEAL:face::Face 1",
        "DEAL:face::1 0.5",
        "DEAL:face::Face 2",
        "DEAL:face::0.5 0",
        "DEAL:face::Face 3",
        "DEAL:face::0.5 1",
    ]


def test_all_faces_section_orientation_false_reverses_points():
    lines = _trace(rules.trapezoid(), dimensions=(), all_face_dimensions=(2,))
    assert lines[1:8] == [
        "DEAL:all::Checking dim 2 1d-points 2",
        "DEAL:all::Face 0 orientation false",
        "DEAL:all::0 1",
        "DEAL:all::0 0",
        "DEAL:all::Face 0 orientation true",
        "DEAL:all::0 0",
        "DEAL:all::0 1",
    ]


def test_empty_rule_trace():
    lines = _trace(rules.empty(), dimensions=(1, 2), all_face_dimensions=(2, 3))
    line = [l for l in lines if l.startswith("DEAL:line::")]
    assert line == ["DEAL:line::length: 0", "DEAL:line::length: 0"]
    # vertex faces still carry their single point
    assert "DEAL:face::Checking dim 1 1d-points 0" in lines
    assert lines[lines.index("DEAL:face::Checking dim 1 1d-points 0") + 2] == "DEAL:face::0"
    all_lines = [l for l in lines if l.startswith("DEAL:all::")]
    assert all(("Face" in l) or ("Checking" in l) for l in all_lines)


def test_run_trace_all_rules():
    stream = io.StringIO()
    run_trace(TraceConfig(), stream)
    lines = stream.getvalue().splitlines()
    assert lines.count("DEAL::") == 5
    assert "DEAL:all::Checking dim 3 1d-points 5" in lines


def test_config_validation():
    with pytest.raises(ValidationError):
        TraceConfig(precision=0)
    with pytest.raises(ValidationError):
        TraceConfig(dimensions=(4,))
    with pytest.raises(ValidationError):
        TraceConfig(rules=("romberg",))
    with pytest.raises(ValidationError):
        TraceConfig(verbose=True)
    assert TraceConfig(rules=["Gauss3", " simpson"]).rules == ("gauss3", "simpson")
    assert TraceConfig(dtype="float32").torch_dtype == torch.float32


def test_config_validates_assignment():
    config = TraceConfig()
    with pytest.raises(ValidationError):
        config.precision = 40


def test_cli_writes_trace(tmp_path):
    out = tmp_path / "trace.txt"
    code = main([
        "--rules", "midpoint",
        "--dimensions", "2",
        "--all-face-dimensions", "2",
        "--output", str(out),
    ])
    assert code == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[1] == "DEAL:line::0\t4 -1"
    assert lines[2] == "DEAL:line::length: 10"


def test_cli_rejects_invalid_config(tmp_path):
    assert main(["--precision", "0", "--output", str(tmp_path / "x.txt")]) == 2


def test_float32_trace_prints_same_points():
    config = TraceConfig(rules=("simpson",), dtype="float32")
    stream32 = io.StringIO()
    run_trace(config, stream32)
    stream64 = io.StringIO()
    run_trace(TraceConfig(rules=("simpson",)), stream64)
    assert stream32.getvalue() == stream64.getvalue()
