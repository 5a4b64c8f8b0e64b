from pathlib import Path

from rich.console import Console

from cachifier.cli.main import main
from cachifier.core.encoding import encode_digest
from cachifier.core.hashing import compute_bytes_digest


def _console() -> Console:
    return Console(record=True, width=400)


def _site(root: Path) -> None:
    (root / "Image1.jpg").write_bytes(b"jpeg bytes")
    (root / "Styles.css").write_text("a { background: url(Image1.jpg); }", encoding="utf-8")
    (root / "README").write_text("not an asset", encoding="utf-8")


def test_run_command_fingerprints_listed_content(tmp_path: Path) -> None:
    _site(tmp_path)
    console = _console()

    code = main(
        [
            "--project-root",
            str(tmp_path),
            "run",
            "--output-dir",
            "cache",
            "--content",
            "Image1.jpg",
            "Styles.css",
            "--mapping",
            "cache/map.json",
        ],
        console=console,
    )

    token = encode_digest(compute_bytes_digest(b"jpeg bytes"))
    assert code == 0
    assert (tmp_path / "cache" / f"Image1,{token}.jpg").exists()
    assert (tmp_path / "cache" / "map.json").exists()
    output = console.export_text()
    assert "Cachified Resources (2)" in output
    assert "orphans_deleted=0" in output


def test_run_command_scan_skips_output_dir_and_unmanaged_files(tmp_path: Path) -> None:
    _site(tmp_path)
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "hook.js").write_text("x", encoding="utf-8")

    assert main(["--project-root", str(tmp_path), "run", "--scan"], console=_console()) == 0
    assert main(["--project-root", str(tmp_path), "run", "--scan"], console=_console()) == 0

    outputs = sorted(p.name.split(",")[0] for p in (tmp_path / "cache").iterdir())
    assert outputs == ["Image1", "Styles"]


def test_run_command_reports_configuration_errors(tmp_path: Path) -> None:
    _site(tmp_path)
    code = main(
        ["--project-root", str(tmp_path), "run", "--output-dir", "../elsewhere", "--content", "Styles.css"],
        console=_console(),
    )
    assert code == 1


def test_hash_command_prints_tokens(tmp_path: Path) -> None:
    _site(tmp_path)
    console = _console()

    code = main(["--project-root", str(tmp_path), "hash", "Image1.jpg", "missing.png"], console=console)

    token = encode_digest(compute_bytes_digest(b"jpeg bytes"))
    output = console.export_text()
    assert code == 1
    assert token in output
    assert f"Image1,{token}.jpg" in output


def test_missing_command_prints_help(tmp_path: Path) -> None:
    assert main(["--project-root", str(tmp_path)], console=_console()) == 2
