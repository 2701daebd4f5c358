"""
Display information useful for debugging.
"""

import platform


def main():
    from importlib.metadata import version

    import facetcheck

    from ._console import message, section

    section("System", newline=False)
    message(f"OS: {platform.platform()}")
    message(f"Python: {platform.python_version()}")

    section("Versions")
    message(f"• facetcheck {facetcheck.__version__}")
    for package in ["numpy", "scipy", "attrs", "pint", "dynaconf"]:
        message(f"• {package} {version(package)}")

    section("Configuration")
    for var in ["SEED", "CHUNK_SIZE", "PROGRESS", "CHECK_MAJORANT", "DISK_RADIUS", "N_BINS"]:
        value = facetcheck.config.settings.get(var)
        message(f"• FACETCHECK_{var}: {value!s}")

    # Private attribute, absent from some dynaconf releases
    loaded_settings_files = list(getattr(facetcheck.config.settings, "_loaded_files", []))
    if loaded_settings_files:
        message("• Loaded settings files:")
        for fname in loaded_settings_files:
            message(f"  • {fname}")
    else:
        message("• Loaded setting files: <none>")
