"""
Conda handler — packages in the active conda environment.

Prefers ``conda list --json`` (an array of package objects); falls back
to the column layout of plain ``conda list``:

    # packages in environment at /opt/miniconda3:
    # Name      Version   Build            Channel
    numpy       1.24.3    py311h08b1b3b_0  defaults
"""

from __future__ import annotations

import logging

from devjanitor.adapters.base import ManagerHandler
from devjanitor.adapters.parsing import iter_lines, load_json, resilient_parser, split_columns
from devjanitor.core.models.config import UninstallOptions
from devjanitor.core.models.package import ManagerId, PackageRecord

logger = logging.getLogger(__name__)


class CondaHandler(ManagerHandler):
    """Conda package manager (Anaconda / Miniconda / Miniforge)."""

    id = ManagerId.CONDA
    display_name = "Conda"
    executable = "conda"
    common_paths = (
        "~/anaconda3/bin/conda",
        "~/miniconda3/bin/conda",
        "~/miniforge3/bin/conda",
        "/opt/anaconda3/bin/conda",
        "/opt/miniconda3/bin/conda",
        "/opt/homebrew/Caskroom/miniconda/base/bin/conda",
        "~/.conda/bin/conda",
        "%USERPROFILE%\\anaconda3\\Scripts\\conda.exe",
        "%USERPROFILE%\\miniconda3\\Scripts\\conda.exe",
    )
    location = "conda-env"

    async def list_packages(self) -> list[PackageRecord]:
        return await self.run_and_parse("list", "--json")

    def uninstall_args(self, name: str, options: UninstallOptions) -> list[str]:
        args = ["remove", "-y"]
        if options.force:
            args.append("--force")
        return [*args, *options.flags, name]

    @resilient_parser
    def parse_output(self, output: str) -> list[PackageRecord]:
        try:
            data = load_json(output)
        except ValueError:
            return self._parse_text(output)

        if not isinstance(data, list):
            return []

        packages: list[PackageRecord] = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            record = self.record(
                entry.get("name"),
                entry.get("version"),
                channel=entry.get("channel"),
            )
            if record:
                packages.append(record)
        return packages

    def _parse_text(self, output: str) -> list[PackageRecord]:
        packages: list[PackageRecord] = []
        for line in iter_lines(output, comment_prefix="#"):
            parts = split_columns(line)
            if len(parts) < 2:
                continue
            channel = parts[3] if len(parts) >= 4 else None
            record = self.record(parts[0], parts[1], channel=channel)
            if record:
                packages.append(record)
        return packages
