import pytest

from facetcheck.config import ProgressLevel, settings


def test_progress_level_conversion():
    # Conversion from string is supported
    assert ProgressLevel.convert("estimator") is ProgressLevel.ESTIMATOR
    with pytest.raises(KeyError):
        ProgressLevel.convert("foo")

    # Conversion of integer is supported
    assert ProgressLevel.convert(1) is ProgressLevel.ESTIMATOR

    # ProgressLevel instances pass through
    assert ProgressLevel.convert(ProgressLevel.NONE) is ProgressLevel.NONE

    # Other types raise
    with pytest.raises(TypeError):
        ProgressLevel.convert(1.0)


def test_settings():
    """
    This test contains a few checks on settings.
    """
    assert isinstance(settings.progress, ProgressLevel)
    assert isinstance(settings.chunk_size, int) and settings.chunk_size > 0
    assert isinstance(settings.check_majorant, bool)
    assert 0.0 < settings.disk_radius <= 1.0
    assert settings.n_bins > 0


def test_settings_override(settings_override):
    settings_override(chunk_size=1000, progress=ProgressLevel.ESTIMATOR)
    assert settings.chunk_size == 1000
    assert settings.progress >= ProgressLevel.ESTIMATOR


def test_config_namespace():
    import facetcheck.config

    # Configuration is exposed through the settings object only
    assert sorted(facetcheck.config.__all__) == ["ProgressLevel", "settings"]
    assert not hasattr(facetcheck.config, "ENV")
