from __future__ import annotations

from ezstremio.interfaces.cli.cli import start

if __name__ == "__main__":
    start()
