"""composeports entry point: scan a tree and print exposed compose services as CSV."""
from __future__ import annotations

import sys
from typing import Optional, TextIO

from composeports import config
from composeports.log import configure_logging, get_logger
from composeports.pipeline import build_pipeline

log = get_logger(__name__)


def run(root: str, out: TextIO, output_format: str = "blocks") -> int:
    """Drive the pipeline over *root*, writing each chunk to *out*. Returns chunks written."""
    log.info("Scanning %s for docker-compose files", root)
    written = 0
    for chunk in build_pipeline(root, output_format):
        out.write(chunk)
        written += 1
    out.flush()
    log.info("Scan of %s complete; %d chunk(s) written", root, written)
    return written


def main(out: Optional[TextIO] = None) -> None:
    cfg = config.load()
    configure_logging(cfg.log_level)
    run(cfg.root, out or sys.stdout, cfg.output_format)


if __name__ == "__main__":
    main()
