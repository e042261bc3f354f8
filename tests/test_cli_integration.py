import json
import os
import subprocess
import sys
from pathlib import Path

from filestats.cli import main, table_rows
from filestats.config import HistogramConfig

ROOT = Path(__file__).resolve().parents[1]


def run_cli(args, cwd=None):
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join([str(ROOT / "src"), str(ROOT), env.get("PYTHONPATH", "")])
    proc = subprocess.run([sys.executable, "-m", "filestats.cli", *args], capture_output=True, text=True, cwd=cwd, env=env)
    return proc


def make_tree(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    (root / "a").mkdir(parents=True)
    for i in range(1, 41):
        (root / "a" / f"f{i}.dat").write_bytes(b"x" * (i * 100))
    (root / "huge.iso").write_bytes(b"x" * 200_000)
    return root


def test_sizes_json_output(tmp_path):
    root = make_tree(tmp_path)
    json_out = tmp_path / "sizes.json"
    proc = run_cli(["sizes", str(root), "--json", str(json_out), "--buckets", "4", "--start", "0", "--end", "100"])
    assert proc.returncode == 0, proc.stderr
    data = json.loads(json_out.read_text(encoding="utf-8"))
    assert data["samples"] == 41
    assert data["max"] == 200_000
    assert len(data["percentiles"]) == 101
    assert len(data["buckets"]) == 4
    assert sum(b["count"] for b in data["buckets"]) == 41


def test_sizes_auto_range_drops_outlier(tmp_path, capsys):
    root = make_tree(tmp_path)
    json_out = tmp_path / "auto.json"
    assert main(["sizes", str(root), "--json", str(json_out)]) == 0
    data = json.loads(json_out.read_text(encoding="utf-8"))
    # The single 200 kB file is outside the automatic histogram range
    assert sum(b["count"] for b in data["buckets"]) < 41
    assert "Wrote statistics JSON" in capsys.readouterr().out


def test_sizes_text_report(tmp_path, capsys):
    root = make_tree(tmp_path)
    assert main(["sizes", str(root), "--no-color", "--log-widths"]) == 0
    out = capsys.readouterr().out
    assert "Files: 41" in out
    assert "Percentiles" in out
    assert "Buckets" in out
    assert "\x1b[" not in out


def test_sizes_suffix_filter(tmp_path):
    root = make_tree(tmp_path)
    json_out = tmp_path / "iso.json"
    assert main(["sizes", str(root), "--suffix", ".ISO", "--json", str(json_out)]) == 0
    data = json.loads(json_out.read_text(encoding="utf-8"))
    assert data["samples"] == 1


def test_mtimes_report(tmp_path, capsys):
    root = make_tree(tmp_path)
    assert main(["mtimes", str(root), "--no-color", "--all"]) == 0
    out = capsys.readouterr().out
    assert "P100" in out
    assert "P37" in out


def test_empty_tree_report(tmp_path, capsys):
    assert main(["sizes", str(tmp_path), "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "No files found." in out


def test_invalid_range_exit_code(tmp_path):
    root = make_tree(tmp_path)
    proc = run_cli(["sizes", str(root), "--start", "60", "--end", "40", "--no-color"])
    assert proc.returncode == 2
    assert "error" in proc.stderr


def test_missing_path_exit_code(tmp_path, capsys):
    assert main(["sizes", str(tmp_path / "missing")]) == 2
    assert "path not found" in capsys.readouterr().err


def test_no_subcommand_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out


def test_table_rows_filtering():
    cfg = HistogramConfig(table_step=10, table_margin=2)
    rows = table_rows(cfg, show_all=False)
    assert rows[:4] == [0, 1, 2, 10]
    assert rows[-4:] == [90, 98, 99, 100]
    assert table_rows(cfg, show_all=True) == list(range(101))
