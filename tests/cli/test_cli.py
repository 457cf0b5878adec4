import os

import pytest

from cyclograph.cli.main import build_parser, main

SOURCE = """\
def classify(n):
    if n < 0:
        return "negative"
    elif n == 0:
        return "zero"
    return "positive"


class Stack:
    def push(self, item):
        self.items.append(item)
"""


@pytest.fixture()
def source(tmp_path):
    path = tmp_path / "mod.py"
    path.write_text(SOURCE, encoding="utf-8")
    return str(path)


def test_analyze(source, tmp_path, capsys):
    out = tmp_path / "out"
    assert main(["analyze", source, "-o", str(out)]) == 0

    report = (out / "complexity_results.txt").read_text(encoding="utf-8")
    assert report == (
        "Function: classify, Cyclomatic Complexity: 3\n"
        "Function: push, Cyclomatic Complexity: 1\n"
    )
    assert sorted(os.listdir(out)) == ["classify_cfg.dot", "complexity_results.txt", "push_cfg.dot"]

    stdout = capsys.readouterr().out
    assert "Function: classify, Complexity: 3" in stdout
    assert "Analyzed 2 functions in 1 file, wrote 3 files" in stdout


def test_analyze_quiet_without_graphs(source, tmp_path, capsys):
    out = tmp_path / "out"
    assert main(["analyze", source, "-o", str(out), "--no-graphs", "-q"]) == 0
    assert os.listdir(out) == ["complexity_results.txt"]
    assert capsys.readouterr().out == ""


def test_analyze_reports_unparsable_files(source, tmp_path, capsys):
    bad = tmp_path / "bad.py"
    bad.write_text("def (:\n", encoding="utf-8")
    out = tmp_path / "out"

    assert main(["analyze", source, str(bad), "-o", str(out)]) == 1
    assert (out / "complexity_results.txt").exists()
    assert "bad.py" in capsys.readouterr().err


def test_analyze_strict(source, tmp_path):
    bad = tmp_path / "bad.py"
    bad.write_text("def (:\n", encoding="utf-8")
    out = tmp_path / "out"

    assert main(["analyze", str(bad), source, "-o", str(out), "--strict"]) == 1
    assert not out.exists()


def test_analyze_invalid_jobs(source, capsys):
    assert main(["analyze", source, "--jobs", "0"]) == 2
    assert "jobs" in capsys.readouterr().err


def test_analyze_unwritable_output(source, tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    assert main(["analyze", source, "-o", str(blocker)]) == 1
    assert "cannot write" in capsys.readouterr().err


def test_dot(source, capsys):
    assert main(["dot", source, "--function", "classify"]) == 0
    stdout = capsys.readouterr().out
    assert stdout.startswith("// classify(n)\ndigraph CFG {\n")
    assert 'Block0 [label="Block 0\\nif n < 0\\n"];' in stdout
    assert "push" not in stdout


def test_dot_all_functions(source, capsys):
    assert main(["dot", source]) == 0
    stdout = capsys.readouterr().out
    assert stdout.count("digraph CFG {") == 2
    assert "// Stack.push(self, item)" in stdout


def test_dot_unknown_function(source, capsys):
    assert main(["dot", source, "-f", "missing"]) == 1
    assert "missing" in capsys.readouterr().err


def test_passes(capsys):
    assert main(["passes"]) == 0
    stdout = capsys.readouterr().out
    for name in ["cyclomatic-complexity", "cfg-dot", "cfg-metrics"]:
        assert name in stdout


def test_key_policy_choices():
    parser = build_parser()
    args = parser.parse_args(["analyze", "x.py", "--key-policy", "qualified"])
    assert args.key_policy == "qualified"
    with pytest.raises(SystemExit):
        parser.parse_args(["analyze", "x.py", "--key-policy", "fuzzy"])
