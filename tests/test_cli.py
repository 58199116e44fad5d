"""Tests for the grid runner and command-line interface."""

import json
from datetime import datetime, timezone

import numpy as np
import pytest
from typer.testing import CliRunner

from wavegrid.cli import app
from wavegrid.core.config import ExportSettings, Settings
from wavegrid.export.metadata import read_companion_json
from wavegrid.export.svg import extract_svg_metadata
from wavegrid.runner import GridRunner

cli = CliRunner()


@pytest.fixture
def settings(tmp_path):
    return Settings(export=ExportSettings(output_dir=tmp_path))


class TestGridRunner:
    """Slider state through to exported files."""

    @pytest.mark.asyncio
    async def test_offline_tidal_render(self, settings):
        runner = GridRunner(settings=settings, grid_size=6)
        at = datetime(2026, 6, 21, 9, 0)
        reading = await runner.fetch("tidal", offline=True, at=at)
        paths = runner.render()

        assert reading.time == at
        assert len(paths) == 14
        assert runner.wave_params.amplitude > 0

    @pytest.mark.asyncio
    async def test_rerender_replaces_geometry(self, settings):
        runner = GridRunner(settings=settings, grid_size=3)
        await runner.fetch("ships", offline=True, rng=np.random.default_rng(1))
        runner.render()
        runner.base_amplitude = 0.0
        paths = runner.render()
        assert len(paths) == 8
        assert len(runner.surface.paths) == 8
        assert runner.wave_params.amplitude == 0.0

    @pytest.mark.asyncio
    async def test_export_svg_records_inputs(self, settings, tmp_path):
        runner = GridRunner(settings=settings, grid_size=4, base_amplitude=10, base_frequency=3)
        await runner.fetch("tidal", offline=True, at=datetime(2026, 6, 21, 9, 0, tzinfo=timezone.utc))
        runner.render()

        result = runner.export("svg", suffix="tidal")
        assert result.path.parent == tmp_path
        assert result.path.name.startswith("RTCT-grid-")
        assert result.path.name.endswith("-tidal.svg")

        metadata = extract_svg_metadata(result.path.read_bytes())
        assert metadata.app == "grid-generator"
        assert metadata.parameters["gridSize"] == 4
        assert metadata.parameters["waveAmplitude"] == 10
        assert metadata.data_source.type == "tidal"

    @pytest.mark.asyncio
    async def test_export_png_writes_companion(self, settings):
        runner = GridRunner(settings=settings, grid_size=2)
        await runner.fetch("ships", offline=True, rng=np.random.default_rng(5))
        runner.render()

        result = runner.export("png", extra_parameters={"note": "test"})
        metadata = read_companion_json(result.companion)
        assert metadata.parameters["note"] == "test"
        assert metadata.data_source.type == "ships"

    def test_defaults_from_settings(self, settings):
        runner = GridRunner(settings=settings)
        assert runner.grid_size == 20
        assert runner.base_amplitude == 15.0
        assert runner.base_frequency == 2.0


class TestCli:

    def test_version(self):
        result = cli.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "wavegrid v" in result.output

    def test_conditions_json(self):
        result = cli.invoke(app, ["conditions", "--offline", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["type"] == "tidal"

    def test_grid_svg(self, tmp_path):
        result = cli.invoke(
            app,
            ["grid", "--offline", "--size", "5", "--output-dir", str(tmp_path), "--content-type", "artwork", "--tag", "digital"],
        )
        assert result.exit_code == 0, result.output

        files = list(tmp_path.glob("*.svg"))
        assert len(files) == 1
        metadata = extract_svg_metadata(files[0].read_bytes())
        assert metadata.parameters["gridSize"] == 5
        assert metadata.taxonomy.tags == ["digital"]

    def test_grid_png(self, tmp_path):
        result = cli.invoke(
            app, ["grid", "--offline", "--source", "ships", "--format", "png", "--output-dir", str(tmp_path)]
        )
        assert result.exit_code == 0, result.output
        assert len(list(tmp_path.glob("*-ships.png"))) == 1
        assert len(list(tmp_path.glob("*-ships.json"))) == 1

    def test_grid_rejects_unknown_source(self, tmp_path):
        result = cli.invoke(app, ["grid", "--offline", "--source", "wind", "--output-dir", str(tmp_path)])
        assert result.exit_code != 0
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.parametrize(
        "option",
        ["--size=0", "--size=-3", "--amplitude=-5", "--frequency=0", "--frequency=-1"],
    )
    def test_grid_rejects_out_of_range_sliders(self, tmp_path, option):
        result = cli.invoke(app, ["grid", "--offline", option, "--output-dir", str(tmp_path)])
        assert result.exit_code == 2
        assert not isinstance(result.exception, ValueError)
        assert list(tmp_path.iterdir()) == []

    def test_tide_table_rejects_zero_size(self, tmp_path):
        result = cli.invoke(
            app,
            ["tide-table", "--at", "2026-06-21T09:00:00", "--offline", "--size=0", "--output-dir", str(tmp_path)],
        )
        assert result.exit_code == 2
        assert list(tmp_path.iterdir()) == []

    def test_grid_accepts_zero_amplitude(self, tmp_path):
        result = cli.invoke(app, ["grid", "--offline", "--amplitude=0", "--output-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output

    def test_tide_table_manual_timestamp(self, tmp_path):
        result = cli.invoke(
            app, ["tide-table", "--at", "2026-06-21T09:00:00", "--offline", "--output-dir", str(tmp_path)]
        )
        assert result.exit_code == 0, result.output

        files = list(tmp_path.glob("tide-table-*-historical.svg"))
        assert len(files) == 1
        metadata = extract_svg_metadata(files[0].read_bytes())
        assert metadata.app == "tide-table"
        assert metadata.parameters["timestampSource"] == "manual"
        assert metadata.parameters["isSimulated"] is True

    def test_tide_table_bad_timestamp(self):
        result = cli.invoke(app, ["tide-table", "--at", "not-a-date", "--offline"])
        assert result.exit_code == 2

    def test_inspect_round_trip(self, tmp_path):
        cli.invoke(app, ["grid", "--offline", "--format", "png", "--output-dir", str(tmp_path)])
        png = next(tmp_path.glob("*.png"))

        result = cli.invoke(app, ["inspect", str(png)])
        assert result.exit_code == 0
        assert json.loads(result.output)["app"] == "grid-generator"

    def test_inspect_without_metadata(self, tmp_path):
        stray = tmp_path / "stray.png"
        stray.write_bytes(b"")
        result = cli.invoke(app, ["inspect", str(stray)])
        assert result.exit_code == 1
