#!/usr/bin/env python3
"""Check that the configured S3 backend is reachable through the gateway.

Usage:
  .venv/bin/python scripts/probe_backend.py
  .venv/bin/python scripts/probe_backend.py --bucket photos --metrics

Reads S3_* settings from the environment (or .env). Exits with status 1 when
the backend cannot be reached.
"""

from __future__ import annotations

import argparse
import sys

from prometheus_client import generate_latest

from gateway.common.config import get_settings
from gateway.common.logging import setup_logging
from gateway.infra.storage.errors import BackendUnavailableError, StorageError
from gateway.services.s3_gateway import S3Gateway


def probe(*, bucket: str | None = None) -> list[str]:
    gateway = S3Gateway.from_settings(get_settings())
    try:
        if bucket:
            info = gateway.get_bucket_info(bucket)
            return [f"{info.name}\t{info.created.isoformat() if info.created else '-'}"]
        return [
            f"{b.name}\t{b.created.isoformat() if b.created else '-'}"
            for b in gateway.list_buckets()
        ]
    finally:
        gateway.shutdown()


def main() -> None:
    parser = argparse.ArgumentParser(description="Probe the S3 gateway backend")
    parser.add_argument(
        "--bucket",
        default=None,
        help="Only look up this bucket (default: list all buckets)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print the Prometheus metrics recorded during the probe",
    )
    args = parser.parse_args()
    setup_logging(get_settings().LOG_LEVEL)
    try:
        lines = probe(bucket=args.bucket)
    except BackendUnavailableError as exc:
        print(f"[UNREACHABLE] {exc}", file=sys.stderr)
        sys.exit(1)
    except StorageError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        sys.exit(2)
    for line in lines:
        print(line)
    if args.metrics:
        print(generate_latest().decode("utf-8"))


if __name__ == "__main__":
    main()
