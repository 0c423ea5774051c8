"""
Export table shared with the scripting host.

The host looks exported functions up by name and may call them without
awaiting earlier calls; coroutine results are awaited transparently.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class ExportRegistry:
    """Name -> callable table the host invokes exports through."""

    def __init__(self):
        self._exports: Dict[str, Callable[..., Any]] = {}

    def register(self, name: str, func: Callable[..., Any]) -> None:
        if name in self._exports:
            logger.warning(f"Export '{name}' registered twice, replacing previous handler")
        self._exports[name] = func
        logger.debug(f"Registered export '{name}'")

    def get(self, name: str) -> Callable[..., Any]:
        try:
            return self._exports[name]
        except KeyError:
            raise KeyError(f"No export named '{name}'") from None

    async def call(self, name: str, *args: Any) -> Any:
        result = self.get(name)(*args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def names(self) -> List[str]:
        return sorted(self._exports)
