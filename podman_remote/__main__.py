"""Allow ``python -m podman_remote``."""

from podman_remote.main import run

run()
