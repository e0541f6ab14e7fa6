"""Function name demangling through an external filter tool.

Names are piped through ``rustfilt`` (or ``c++filt``) in one batch, one
name per line. When the tool is missing or fails, names come back
unchanged.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Iterable

from covhtml.config.models import DemangleConfig
from covhtml.core.logging import get_logger

log = get_logger("demangle")


class Demangler:
    """Batch demangler with a per-instance cache."""

    def __init__(self, config: DemangleConfig | None = None) -> None:
        self._config = config or DemangleConfig()
        self._cache: dict[str, str] = {}
        self._tool: str | None = None
        self._resolved = False

    @property
    def tool_path(self) -> str | None:
        """Resolved demangler executable, or None when unavailable or disabled."""
        if not self._resolved:
            self._resolved = True
            if self._config.enabled:
                self._tool = shutil.which(self._config.tool)
                if self._tool is None:
                    log.warning("demangler_unavailable", tool=self._config.tool)
        return self._tool

    def demangle_all(self, names: Iterable[str]) -> dict[str, str]:
        """Demangle many names with at most one tool invocation.

        Returns:
            Mapping of every input name to its demangled form.
        """
        names = list(dict.fromkeys(names))
        pending = [n for n in names if n not in self._cache]

        if pending:
            self._cache.update(self._run_tool(pending))

        return {name: self._cache[name] for name in names}

    def demangle(self, name: str) -> str:
        return self.demangle_all([name])[name]

    def _run_tool(self, names: list[str]) -> dict[str, str]:
        identity = {name: name for name in names}
        tool = self.tool_path
        # Names containing newlines would desynchronise the line protocol
        if tool is None or any("\n" in name for name in names):
            return identity

        try:
            result = subprocess.run(
                [tool],
                input="\n".join(names) + "\n",
                capture_output=True,
                text=True,
                timeout=self._config.timeout_sec,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            log.warning("demangler_failed", tool=tool, error=str(e))
            return identity

        if result.returncode != 0:
            log.warning(
                "demangler_failed",
                tool=tool,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            return identity

        demangled = result.stdout.splitlines()
        if len(demangled) != len(names):
            log.warning("demangler_output_mismatch", expected=len(names), got=len(demangled))
            return identity

        return dict(zip(names, demangled, strict=True))
