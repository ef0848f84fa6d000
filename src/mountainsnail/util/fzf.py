# mountainsnail/util/fzf.py
"""
Helper functions for path selection using `fzf`
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from shutil import which

from mountainsnail.errors import FzfNotFoundError, SelectionError


def fzf_select_paths(paths: list[Path], *, header: str) -> list[Path]:
    """Let the user pick one of `paths`; an empty list means nothing was chosen."""
    if not which("fzf"):
        raise FzfNotFoundError("fzf not found on PATH. Install fzf or pass the file path explicitly.")

    lines = [f"{p.name}\t{p}" for p in paths]
    input_text = "\n".join(lines) + "\n"
    selected: list[Path] = []

    cmd = [
        "fzf",
        "--ansi",
        "--delimiter=\t",
        "--nth=1",
        "--with-nth=1",
        "--height=60%",
        "--layout=reverse",
        "--border",
        "--header", header,
        "--no-multi",
    ]

    proc = subprocess.run(
        cmd,
        input=input_text.encode(),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )

    # 1: no match, 130: aborted with ESC / Ctrl-C
    if proc.returncode not in (0, 1, 130):
        raise SelectionError(f"fzf failed: {proc.stderr.decode(errors='replace')}")

    out = proc.stdout.decode().strip()
    if not out:
        return []

    for line in out.splitlines():
        line = line.strip()
        if not line:
            continue
        # line is: "name<TAB>fullpath"
        path_str = line.split("\t", 1)[1] if "\t" in line else line
        selected.append(Path(path_str).expanduser().resolve())
    return selected
