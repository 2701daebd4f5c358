from __future__ import annotations

import enum
import typing as t

from dynaconf import Dynaconf, Validator

from . import _defaults


class ProgressLevel(enum.IntEnum):
    """
    Progress display levels. Levels compare as integers, so that a feature
    shows progress when ``settings.progress`` is at least its level.
    """

    NONE = 0  #: No progress
    ESTIMATOR = enum.auto()  #: Progress bar over the trial chunks of an estimator

    @staticmethod
    def convert(value: t.Any) -> ProgressLevel:
        """
        Convert a level name (case-insensitive), an integer or a
        :class:`.ProgressLevel` to a :class:`.ProgressLevel`.

        Raises
        ------
        TypeError
            If ``value`` has none of the supported types.
        """
        if isinstance(value, ProgressLevel):
            return value
        elif isinstance(value, str):
            return ProgressLevel[value.upper()]
        elif isinstance(value, int):
            return ProgressLevel(value)
        else:
            raise TypeError(f"Cannot convert a {type(value)} instance to ProgressLevel")


def _cast_seed(value: t.Any) -> int | None:
    return None if value is None else int(value)


def _validate_positive(value: t.Any) -> bool:
    return value > 0


#: Main settings data structure. See the `Dynaconf documentation <https://www.dynaconf.com/>`__
#: for details.
settings = Dynaconf(
    settings_files=["facetcheck.yml", "facetcheck.yaml", "facetcheck.toml"],
    envvar_prefix="FACETCHECK",
    merge_enabled=True,
    validate_on_update=True,
    validators=[
        Validator(
            "SEED",
            cast=_cast_seed,
            default=_defaults.seed,
        ),
        Validator(
            "CHUNK_SIZE",
            cast=int,
            condition=_validate_positive,
            default=_defaults.chunk_size,
        ),
        Validator(
            "CHECK_MAJORANT",
            cast=bool,
            default=_defaults.check_majorant,
        ),
        Validator(
            "DISK_RADIUS",
            cast=float,
            condition=lambda x: 0.0 < x <= 1.0,
            default=_defaults.disk_radius,
        ),
        Validator(
            "N_BINS",
            cast=int,
            condition=_validate_positive,
            default=_defaults.n_bins,
        ),
        Validator(
            "PROGRESS",
            cast=ProgressLevel.convert,
            default=_defaults.progress,
        ),
    ],
)
