import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
CASES = ROOT / "tests" / "cases"


def _run_cli(args, cwd: Path = ROOT):
    env = os.environ.copy()
    pythonpath = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = str(ROOT / "src") + (os.pathsep + pythonpath if pythonpath else "")
    result = subprocess.run(
        [sys.executable, "-m", "cli", *args],
        cwd=cwd,
        env=env,
        check=False,
        capture_output=True,
        text=True,
    )
    return result


def test_cli_writes_source_back():
    result = _run_cli([str(CASES / "blocks.rb"), "write"])
    assert result.returncode == 0, result.stderr
    assert result.stdout == (CASES / "blocks.rb").read_text(encoding="utf-8")


def test_cli_combines_modules(tmp_path):
    output_path = tmp_path / "combined.rb"
    result = _run_cli([str(CASES / "greeter.rb"), "combine_modules", "--out", str(output_path)])
    assert result.returncode == 0, result.stderr
    content = output_path.read_text(encoding="utf-8")
    assert content.count("class Greeter") == 1
    assert "def greet(name)" in content
    assert "def farewell" in content


def test_cli_renames_locals():
    result = _run_cli([str(CASES / "blocks.rb"), "edit_method"])
    assert result.returncode == 0, result.stderr
    assert "def total(a)" in result.stdout
    assert "b = 0" in result.stdout
    assert "a.each do |c|" in result.stdout


def test_cli_explores_constants():
    result = _run_cli([str(CASES / "constants.rb"), "explore_constants"])
    assert result.returncode == 0, result.stderr
    assert json.loads(result.stdout) == {
        "Config": {
            "VERSION": '"1.0"',
            "LIMIT": "10",
            "Inner": {"ENABLED": "true"},
        }
    }


def test_cli_inserts_marker():
    result = _run_cli([str(CASES / "constants.rb"), "insert_marker"])
    assert result.returncode == 0, result.stderr
    assert result.stdout.endswith('  "test"\nend\n')


def test_cli_rejects_unknown_instruction():
    result = _run_cli([str(CASES / "greeter.rb"), "compile"])
    assert result.returncode == 1
    assert "Unknown instruction: compile" in result.stderr
    assert "usage: rbunparse" in result.stderr


def test_cli_missing_file(tmp_path):
    result = _run_cli([str(tmp_path / "absent.rb"), "write"])
    assert result.returncode == 1
    assert "Input file not found" in result.stderr


def test_cli_reports_syntax_errors():
    tolerant = _run_cli([str(CASES / "broken.rb"), "write"])
    assert tolerant.returncode == 1
    assert "ERROR" in tolerant.stderr

    strict = _run_cli([str(CASES / "broken.rb"), "write", "--strict"])
    assert strict.returncode == 1
    assert "broken.rb:1" in strict.stderr


def test_cli_accepts_json_tree(tmp_path):
    tree = {
        "type": "send",
        "method_name": "puts",
        "args": [{"type": "str", "value": "hi", "begin_l": [5, 6], "end_l": [8, 9]}],
    }
    tree_path = tmp_path / "tree.json"
    tree_path.write_text(json.dumps(tree), encoding="utf-8")

    result = _run_cli([str(tree_path), "write"])
    assert result.returncode == 0, result.stderr
    assert result.stdout == 'puts "hi"\n'


def test_cli_rejects_malformed_json_tree(tmp_path):
    tree_path = tmp_path / "tree.json"
    tree_path.write_text('{"type": "bogus"}', encoding="utf-8")

    result = _run_cli([str(tree_path), "write"])
    assert result.returncode == 1
    assert "Unknown node type" in result.stderr


def test_cli_skeleton_output():
    result = _run_cli([str(CASES / "documented.rb"), "write", "--skeleton"])
    assert result.returncode == 0, result.stderr
    assert "# Says hello." in result.stdout
    assert "puts name" not in result.stdout
