"""
Append credentials from a file to a service pool.

Usage:
    python manage.py restock_pool netflix /path/to/accounts.txt
    cat accounts.txt | python manage.py restock_pool netflix -
"""

import sys

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import LockAcquisitionError
from credentials.exceptions import CredentialError
from credentials.pool import CredentialPool


class Command(BaseCommand):
    help = "Append credentials (one per line) to a service pool"

    def add_arguments(self, parser):
        parser.add_argument("service", help="Pool to restock")
        parser.add_argument("source", help="File with one credential per line, or - for stdin")

    def handle(self, *args, **options):
        service = options["service"]
        source = options["source"]

        try:
            if source == "-":
                lines = sys.stdin.read().splitlines()
            else:
                with open(source, encoding="utf-8") as handle:
                    lines = handle.read().splitlines()
        except OSError as e:
            raise CommandError(f"Cannot read {source}: {e}") from e

        try:
            size = CredentialPool.from_settings().append(service, lines)
        except (CredentialError, LockAcquisitionError) as e:
            raise CommandError(e.message) from e

        self.stdout.write(self.style.SUCCESS(f"{service}: {size} credentials in stock"))
