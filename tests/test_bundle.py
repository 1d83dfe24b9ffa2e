"""Tests for multi-format export and the command line entry point."""

from __future__ import annotations

import json
import logging
import re
import sys
from pathlib import Path
from typing import Iterator

import pytest
from PIL import Image

from eightsix.cli import build_parser, export_main, main, resolve_config
from eightsix.configs.loader import GeneratorConfig, load_config
from eightsix.export import raster
from eightsix.export.bundle import FORMATS, default_filename, export_bundle
from eightsix.pattern.generator import generate_from_config
from eightsix.utils import logging_config


@pytest.fixture()
def config() -> GeneratorConfig:
    return GeneratorConfig(text="Eightsix", dot_size=45, spread=0.85, padding=20, seed=12345)


@pytest.fixture()
def fake_decoder(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        raster, "decode_svg", lambda svg_bytes, size: Image.new("RGBA", (size, size)),
    )


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


class TestDefaultFilename:
    def test_fixed_time(self) -> None:
        assert default_filename(1700000000123) == "eightsix-logo-1700000000123"

    def test_current_time(self) -> None:
        assert re.fullmatch(r"eightsix-logo-\d{13}", default_filename())


class TestExportBundle:
    def test_vector_and_page_only(self, tmp_path: Path, config: GeneratorConfig) -> None:
        dots = generate_from_config(config)
        files = export_bundle(dots, config, "logo", tmp_path, formats=["svg", "EPS", "svg"])
        assert list(files) == ["svg", "eps"]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["logo.eps", "logo.svg"]

    def test_all_formats(self, tmp_path: Path, config: GeneratorConfig, fake_decoder: None) -> None:
        dots = generate_from_config(config)
        files = export_bundle(dots, config, "logo", tmp_path, size=16)
        assert tuple(files) == FORMATS
        assert all(p.exists() for p in files.values())

    def test_unknown_format_writes_nothing(self, tmp_path: Path, config: GeneratorConfig) -> None:
        dots = generate_from_config(config)
        with pytest.raises(ValueError, match="pdf"):
            export_bundle(dots, config, "logo", tmp_path, formats=["svg", "pdf"])
        assert list(tmp_path.iterdir()) == []

    def test_same_snapshot_in_every_format(self, tmp_path: Path, config: GeneratorConfig) -> None:
        dots = generate_from_config(config)
        files = export_bundle(dots, config, "logo", tmp_path, formats=["svg", "eps"])
        svg = files["svg"].read_text(encoding="utf-8")
        eps = files["eps"].read_text(encoding="utf-8")
        assert svg.count("<circle") == len(dots)
        assert eps.count(" setgray\n") == len(dots)
        assert f'fill="{dots[-1].color}"/></g>' in svg


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_flags_override_json(self) -> None:
        args = build_parser().parse_args(
            ["--config-json", '{"text": "86", "seed": 5}', "--seed", "9", "--padding", "0"],
        )
        config, error = resolve_config(args)
        assert not error
        assert (config.text, config.seed, config.padding) == ("86", 9, 0)

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"dotSize": 60}))
        config, error = resolve_config(build_parser().parse_args(["--config-json", str(path)]))
        assert not error
        assert config.dot_size == 60

    def test_randomize_keeps_other_fields(self) -> None:
        args = build_parser().parse_args(["--text", "x", "--randomize"])
        config, _ = resolve_config(args)
        assert config.text == "x"
        assert 0 <= config.seed < 100000


class TestExportMain:
    def test_results(self, tmp_path: Path, config: GeneratorConfig) -> None:
        result = export_main(config, tmp_path, formats=["svg"], filename="logo")
        assert len(result["dots"]) == 86
        assert len(result["fingerprint"]) == 64
        assert result["files"] == {"svg": tmp_path / "logo.svg"}


class TestMain:
    @pytest.fixture(autouse=True)
    def restore_process_hooks(self, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
        monkeypatch.setattr(sys, "excepthook", sys.excepthook)
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)
        for handler in logging_config._installed:
            root.removeHandler(handler)
            handler.close()
        logging_config._installed.clear()

    def test_writes_requested_formats(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        code = main([
            "--text", "Hello", "--seed", "42",
            "--format", "svg", "--format", "eps",
            "--output", str(tmp_path), "--filename", "hello",
            "--log-level", "WARNING",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert f"SVG: {tmp_path / 'hello.svg'}" in out
        assert (tmp_path / "hello.eps").exists()
        assert not (tmp_path / "hello.png").exists()

    def test_malformed_json(self, tmp_path: Path) -> None:
        code = main([
            "--config-json", "{not json", "--output", str(tmp_path), "--log-level", "WARNING",
        ])
        assert code == 2
        assert list(tmp_path.iterdir()) == []

    def test_missing_config(self, tmp_path: Path) -> None:
        code = main(["--config", str(tmp_path / "missing.yaml"), "--log-level", "WARNING"])
        assert code == 1

    def test_raster_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(svg_bytes: bytes, size: int) -> Image.Image:
            raise OSError("no cairo")

        monkeypatch.setattr(raster, "decode_svg", broken)
        code = main([
            "--format", "png", "--output", str(tmp_path), "--filename", "x",
            "--log-level", "WARNING",
        ])
        assert code == 1
        assert not (tmp_path / "x.png").exists()

    def test_print_and_save_config(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        saved = tmp_path / "cfg.yaml"
        code = main([
            "--text", "86", "--format", "eps", "--output", str(tmp_path),
            "--filename", "x", "--save-config", str(saved), "--print-json",
            "--log-level", "WARNING",
        ])
        assert code == 0
        out = capsys.readouterr().out
        printed = json.loads(out[: out.rindex("}") + 1])
        assert printed["text"] == "86"
        assert load_config(saved).text == "86"

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "run.log"
        code = main([
            "--seed", "42", "--format", "svg", "--output", str(tmp_path / "out"),
            "--filename", "x", "--log-file", str(log_file), "--log-max-bytes", "100000",
        ])
        assert code == 0
        assert sys.excepthook is not sys.__excepthook__
        text = log_file.read_text(encoding="utf-8")
        assert "seed=42" in text
        assert "sha256" in text
