import numpy as np
import pytest
from typer.testing import CliRunner

from facetcheck.cli import app

runner = CliRunner()


def test_help():
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "sigma" in result.stdout
    assert "eval-sample" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("facetcheck version")


def test_sigma():
    result = runner.invoke(app, ["sigma", "0.5", "1.3", "2.0", "0.5", "--samples", "2000"])
    assert result.exit_code == 0, result.stdout

    lines = result.stdout.strip().splitlines()
    assert lines[:4] == ["roughness: 0.5", "majorant: 1.3", "gamma: 2", "du: 0.5"]

    # Reference at u = -0.999, -0.499, 0.001, 0.501; estimates at u = -1, -0.5, 0, 0.5
    reference = np.array(lines[4].split(), dtype=float)
    estimates = np.array(lines[5].split(), dtype=float)
    assert reference.shape == estimates.shape == (4,)
    assert np.all((estimates >= 0.0) & (estimates <= 1.0))
    assert np.all(np.diff(reference) > 0.0)

    # Views from straight below see no facet
    assert estimates[0] == 0.0
    assert np.isclose(estimates[3], reference[3], atol=0.05)


def test_sigma_invalid():
    # Shape parameter must exceed 1
    result = runner.invoke(app, ["sigma", "0.5", "1.3", "0.5", "0.5"])
    assert result.exit_code != 0

    # Missing argument
    result = runner.invoke(app, ["sigma", "0.5", "1.3"])
    assert result.exit_code != 0


def test_eval_sample():
    result = runner.invoke(app, ["eval-sample", "0.5", "0.5", "30", "5000", "5000"])
    assert result.exit_code == 0, result.stdout

    lines = result.stdout.strip().splitlines()
    assert len(lines) == 11

    table = np.array([line.split() for line in lines[:10]], dtype=float)
    assert table.shape == (10, 4)
    assert np.allclose(table[:, 0], np.linspace(-1.0, 0.8, 10))
    assert np.allclose(table[:, 1], np.linspace(-0.8, 1.0, 10))

    sample, evaluated, rel_diff = np.array(lines[10].split(), dtype=float)
    assert np.isclose(table[:, 2].sum(), sample, rtol=1e-4)
    assert np.isclose(table[:, 3].sum(), evaluated, rtol=1e-4)
    assert np.isclose(rel_diff, (sample - evaluated) / evaluated, rtol=1e-3, atol=1e-5)


@pytest.mark.parametrize(
    "args",
    [["0.5", "0.5", "30", "0", "10"], ["0.0", "0.5", "30", "10", "10"], ["0.5"]],
    ids=["no_samples", "zero_roughness", "missing"],
)
def test_eval_sample_invalid(args):
    result = runner.invoke(app, ["eval-sample", *args])
    assert result.exit_code != 0


def test_sys_info():
    result = runner.invoke(app, ["sys-info"])
    assert result.exit_code == 0
    assert "FACETCHECK_SEED" in result.stdout
    assert "Loaded setting" in result.stdout


class _Settings:
    """Minimal settings object exposing only value lookup."""

    def get(self, key):
        return None


@pytest.mark.parametrize(
    "loaded_files, expected",
    [
        (None, "Loaded setting files: <none>"),
        ([], "Loaded setting files: <none>"),
        (["facetcheck.toml"], "• facetcheck.toml"),
    ],
    ids=["unavailable", "none", "toml"],
)
def test_sys_info_loaded_files(monkeypatch, loaded_files, expected):
    import facetcheck.config

    settings = _Settings()
    if loaded_files is not None:
        settings._loaded_files = loaded_files
    monkeypatch.setattr(facetcheck.config, "settings", settings)

    result = runner.invoke(app, ["sys-info"])
    assert result.exit_code == 0, result.output
    assert expected in result.stdout
