#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

"""Build '.tar.xz' archives with a pre-installed tar command."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from am_context import AmalgamContext
from am_logger import log_error, log_info

ARCHIVE_SUFFIX = ".tar.xz"


@dataclass(frozen=True)
class ArchivePlan:
    source_path: Path
    source_folder: Path
    source_name: str
    dest_folder: Path
    archive_path: Path
    archive_name: str

    def describe(self) -> str:
        return (
            f"archive '{self.archive_name}' as file '{self.archive_path}' from object "
            f"'{self.source_name}' identified by path '{self.source_path}' into folder "
            f"'{self.dest_folder}'"
        )


def remove_file_extension(name: str) -> str:
    """'data.csv' -> 'data'; names without an extension (or dot files) are kept."""
    i = name.rfind(".")
    return name[:i] if i > 0 else name


def plan_archive(path_to_compress: str | Path, destination: str | Path | None = None) -> ArchivePlan:
    """
    Work out where the archive of path_to_compress goes:

      - no destination: '<stem>.tar.xz' next to the source
      - an existing directory: '<stem>.tar.xz' inside it
      - anything else: used literally as the archive path
    """
    source_path = Path(path_to_compress).resolve()
    source_folder = source_path.parent
    source_name = source_path.name

    if destination is None:
        dest_folder = source_folder
    else:
        dest = Path(destination).resolve()
        if dest.is_dir():
            dest_folder = dest
        else:
            return ArchivePlan(
                source_path=source_path,
                source_folder=source_folder,
                source_name=source_name,
                dest_folder=dest.parent,
                archive_path=dest,
                archive_name=dest.name,
            )

    archive_name = remove_file_extension(source_name) + ARCHIVE_SUFFIX
    return ArchivePlan(
        source_path=source_path,
        source_folder=source_folder,
        source_name=source_name,
        dest_folder=dest_folder,
        archive_path=(dest_folder / archive_name).resolve(),
        archive_name=archive_name,
    )


def compress(
    path_to_compress: str | Path,
    destination: str | Path | None = None,
    context: AmalgamContext | None = None,
) -> Optional[int]:
    """
    Compress a file or folder with 'tar -cJf' at the strongest xz setting.

    Returns tar's exit code, or None if tar could not be started. Failures
    are logged, never raised.
    """
    context = context or AmalgamContext.default()
    plan = plan_archive(path_to_compress, destination)

    log_info(context, f"Trying to build {plan.describe()}")
    env = dict(os.environ, XZ_OPT="-9e")
    try:
        completed = subprocess.run(
            ["tar", "-cJf", str(plan.archive_path), plan.source_name],
            cwd=plan.source_folder,
            env=env,
            stderr=subprocess.STDOUT,
        )
    except OSError as e:
        log_error(
            context,
            f"error: [ARC-0010] Failed to build {plan.describe()}, "
            f"maybe you do not have the tar command installed: {e}",
        )
        return None

    if completed.returncode != 0:
        log_error(
            context,
            f"error: [ARC-0020] Failed to build {plan.describe()}, return code {completed.returncode}",
        )
    else:
        log_info(context, f"Finished building {plan.describe()}, return code {completed.returncode}")
    return completed.returncode
