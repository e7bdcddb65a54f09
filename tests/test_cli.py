"""
Tests for the command-line interface.
"""

import json
import subprocess
import sys
import pytest

from ridecalc.cli.calculate import main


class TestCLIEntryPoints:
    """Test that CLI entry points defined in pyproject.toml are importable."""

    def test_entry_point_importable(self):
        """Test that the CLI entry point module and function exist."""
        from ridecalc.cli.calculate import main as entry
        assert callable(entry)

    def test_entry_point_via_subprocess(self):
        """Test entry point works when invoked as module."""
        result = subprocess.run(
            [sys.executable, "-m", "ridecalc.cli.calculate", "--help"],
            capture_output=True,
            text=True
        )
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()


class TestCLIBasic:
    """Basic CLI tests."""

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])

    def test_missing_required_option(self):
        with pytest.raises(SystemExit):
            main(["chain-length", "--chainring", "32"])


class TestTirePressureCommand:
    """Tests for the tire-pressure subcommand."""

    def test_summary(self, capsys):
        rc = main(["tire-pressure", "--rider-weight", "80", "--bike-weight", "14",
                   "--tire-width", "60", "--terrain", "trail"])
        out = capsys.readouterr().out
        assert rc == 0
        assert "Tire Pressure" in out
        assert "20.5 PSI" in out

    def test_json(self, capsys):
        rc = main(["--json", "tire-pressure", "--rider-weight", "80", "--bike-weight", "14",
                   "--tire-width", "60", "--tubeless"])
        data = json.loads(capsys.readouterr().out)
        assert rc == 0
        assert data["rear_psi"] < 24.0

    def test_invalid_width(self, capsys):
        rc = main(["tire-pressure", "--rider-weight", "80", "--bike-weight", "14",
                   "--tire-width", "0"])
        err = capsys.readouterr().err
        assert rc == 1
        assert "Error:" in err
        assert "tire_width_mm" in err


class TestSuspensionCommand:
    """Tests for the suspension subcommand."""

    def test_hardtail(self, capsys):
        rc = main(["--json", "suspension", "--rider-weight", "75", "--category", "hardtail"])
        data = json.loads(capsys.readouterr().out)
        assert rc == 0
        assert data["shock"] is None
        assert data["fork"]["pressure_psi"] == 76

    def test_fork_preset(self, capsys):
        rc = main(["suspension", "--rider-weight", "75", "--fork", "Fox 36 GRIP2"])
        assert rc == 0
        assert "Fork (Fox GRIP2)" in capsys.readouterr().out

    def test_too_heavy(self, capsys):
        rc = main(["suspension", "--rider-weight", "250"])
        assert rc == 1
        assert "rider_weight_kg" in capsys.readouterr().err


class TestChainCommands:
    """Tests for chain-length and chainline."""

    def test_chain_length(self, capsys):
        rc = main(["chain-length", "--chainring", "32", "--largest-cog", "52",
                   "--chainstay", "435"])
        assert rc == 0
        assert "Links: 76" in capsys.readouterr().out

    def test_chainline_json(self, capsys):
        rc = main(["--json", "chainline", "--chainring-offset", "49", "--cassette-offset", "2",
                   "--chainstay", "435", "--frame", "boost"])
        data = json.loads(capsys.readouterr().out)
        assert rc == 0
        assert data["deviation_mm"] == 0.0
        assert data["frame_type"] == "boost"

    def test_save_json(self, capsys, tmp_path):
        out_file = tmp_path / "chain.json"
        rc = main(["--save-json", str(out_file), "chain-length", "--chainring", "32",
                   "--largest-cog", "52", "--chainstay", "435"])
        assert rc == 0
        assert json.loads(out_file.read_text())["links"] == 76
        assert "Saved result" in capsys.readouterr().err


class TestCompareCommand:
    """Tests for the compare subcommand."""

    def test_markdown(self, catalog_file, capsys):
        rc = main(["compare", "--catalog", str(catalog_file),
                   "--current", "xt-m8100,ring-32,hub-ms,chain-12",
                   "--proposed", "gx-eagle,ring-32", "--markdown"])
        captured = capsys.readouterr()
        assert rc == 0
        assert captured.out.startswith("# Drivetrain Comparison")
        assert "Loading catalog" in captured.err

    def test_json(self, catalog_file, capsys):
        rc = main(["--json", "compare", "--catalog", str(catalog_file),
                   "--current", "xt-m8100,ring-32,hub-ms", "--proposed", "gx-eagle,ring-32"])
        data = json.loads(capsys.readouterr().out)
        assert rc == 0
        assert data["compatibility"]["status"] == "incompatible"
        assert data["performance"]["gear_range"]["proposed"] == 420

    def test_missing_catalog(self, tmp_path, capsys):
        rc = main(["compare", "--catalog", str(tmp_path / "none.json"),
                   "--current", "a", "--proposed", "b"])
        assert rc == 1
        assert "Catalog file not found" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("not valid json {")
        rc = main(["compare", "--catalog", str(bad), "--current", "a", "--proposed", "b"])
        assert rc == 1

    def test_unknown_id(self, catalog_file, capsys):
        rc = main(["compare", "--catalog", str(catalog_file),
                   "--current", "xt-m8100,ring-32", "--proposed", "nope"])
        assert rc == 1
        assert "nope" in capsys.readouterr().err

    def test_missing_chainring(self, catalog_file, capsys):
        rc = main(["compare", "--catalog", str(catalog_file),
                   "--current", "xt-m8100,ring-32", "--proposed", "gx-eagle"])
        assert rc == 1
        assert "proposed setup is missing chainring data" in capsys.readouterr().err
