"""Template acquisition: local paths pass through, git URLs are cloned.

A location ending in ``.git`` is treated as a remote repository and cloned
into ``<cache_dir>/<md5 of the location>``; any stale clone there is wiped
first.  Anything else must be an existing local directory.
"""

from __future__ import annotations

import hashlib
import os
import shutil
import subprocess
from pathlib import Path

from scaffold.config import FetchConfig
from scaffold.errors import FetchError
from scaffold.utils import print_step

REMOTE_SUFFIX = ".git"


def is_remote(location: str) -> bool:
    """Return ``True`` if *location* names a remote git repository."""
    return location.rstrip("/").endswith(REMOTE_SUFFIX)


def cache_path_for(location: str, cache_dir: str | Path) -> Path:
    """Deterministic clone directory for *location* under *cache_dir*."""
    digest = hashlib.md5(location.encode("utf-8")).hexdigest()
    return Path(cache_dir) / digest


def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: float = 300.0,
    interactive: bool = False,
) -> tuple[str, str]:
    """Run a git command and return (stdout, stderr).

    Non-interactive runs forbid git and ssh from prompting, so a missing
    credential fails fast instead of hanging.  Interactive runs inherit stdin
    so ssh can ask for a key passphrase.

    Raises FetchError if the command times out or exits non-zero.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)

    env = dict(os.environ)
    if not interactive:
        env["GIT_TERMINAL_PROMPT"] = "0"
        env.setdefault("GIT_SSH_COMMAND", "ssh -o BatchMode=yes")

    try:
        completed = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=env,
            stdin=None if interactive else subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise FetchError(
            f"Git command timed out after {timeout}s: {cmd_str}",
            command=cmd_str,
        ) from exc
    except OSError as exc:
        raise FetchError(f"cannot run git: {exc}", command=cmd_str) from exc

    stdout = (completed.stdout or b"").decode("utf-8", errors="replace").strip()
    stderr = (completed.stderr or b"").decode("utf-8", errors="replace").strip()

    if completed.returncode != 0:
        raise FetchError(
            f"Git command failed (exit {completed.returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


class TemplateFetcher:
    """Turns a template location into a local directory."""

    def __init__(self, config: FetchConfig | None = None) -> None:
        self.config = config or FetchConfig()

    def fetch(self, location: str, passphrase_needed: bool = False) -> Path:
        """Return a local directory holding the template at *location*.

        Args:
            location: Local path, or a git URL ending in ``.git``.
            passphrase_needed: Let ssh prompt for the key passphrase.

        Raises:
            FetchError: The clone failed or the local path is not a directory.
        """
        if is_remote(location):
            return self._clone(location, passphrase_needed)

        path = Path(location).expanduser()
        if not path.is_dir():
            raise FetchError(f"template location {location} is not a directory")
        return path

    def _clone(self, location: str, passphrase_needed: bool) -> Path:
        destination = cache_path_for(location, self.config.cache_dir)
        try:
            if destination.exists():
                shutil.rmtree(destination)
            destination.mkdir(parents=True)
        except OSError as exc:
            raise FetchError(f"cannot prepare cache directory {destination}: {exc}") from exc

        print_step(f"Cloning {location}...")
        args = ["clone"]
        if self.config.clone_depth:
            args += ["--depth", str(self.config.clone_depth)]
        args += ["--", location, str(destination)]
        _run_git(
            *args,
            timeout=self.config.clone_timeout,
            interactive=passphrase_needed,
        )
        return destination
