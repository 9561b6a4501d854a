"""BaseService — foundation for texflat services.

Every service receives the frozen :class:`TexflatSettings` at
construction time and reads its ``[flatten]`` section from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from texflat.config.models import FlattenConfig
    from texflat.config.settings import TexflatSettings


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class FlattenService(BaseService):
            def flatten(self, input_dir: Path, output_dir: Path) -> ServiceResult:
                delimiter = self._config.delimiter
                ...
    """

    def __init__(self, settings: TexflatSettings) -> None:
        self._settings = settings

    @property
    def _config(self) -> FlattenConfig:
        return self._settings.flatten
