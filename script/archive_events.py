#!/usr/bin/env python3
"""
Archive Events Script
Archive active events whose end time (+ buffer) has passed

Usage:
    python script/archive_events.py                     # archive everything eligible
    python script/archive_events.py --dry-run           # only list eligible events
    python script/archive_events.py --buffer-hours 48
    python script/archive_events.py --organizer-id org-1
    python script/archive_events.py --stats             # status counts / archive rate
    python script/archive_events.py --cleanup-logs      # drop audit entries older than 90 days
    python script/archive_events.py --cleanup-logs 30

Notes:
- Safe to re-run: archived events are no longer active, failed ones are retried
- Uses the same STORAGE_BACKEND / POSTGRES_* settings as the API
"""

import argparse
import sys

import anyio

from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engine
from src.service.ticketing.app.command.archive_batch_use_case import ArchiveBatchUseCase
from src.service.ticketing.app.command.archive_event_use_case import ArchiveEventUseCase
from src.service.ticketing.app.command.cleanup_archive_logs_use_case import (
    CleanupArchiveLogsUseCase,
)
from src.service.ticketing.app.dto.archive_result import ArchiveOutcomeStatus
from src.service.ticketing.app.query.get_archive_stats_use_case import GetArchiveStatsUseCase

STATUS_ICONS = {
    ArchiveOutcomeStatus.ARCHIVED: '✅',
    ArchiveOutcomeStatus.ELIGIBLE: '🔎',
    ArchiveOutcomeStatus.FAILED: '❌',
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Archive past events')
    parser.add_argument(
        '--buffer-hours',
        type=float,
        default=settings.ARCHIVE_BUFFER_HOURS,
        help='hours after an event ends before it is archived (default: %(default)s)',
    )
    parser.add_argument('--organizer-id', default=None, help='only archive this organizer')
    parser.add_argument('--dry-run', action='store_true', help='list eligible events only')
    parser.add_argument('--stats', action='store_true', help='print archive statistics')
    parser.add_argument(
        '--cleanup-logs',
        type=int,
        nargs='?',
        const=settings.ARCHIVE_LOG_RETENTION_DAYS,
        default=None,
        metavar='DAYS',
        help='delete archive log entries older than DAYS (default: %(const)s)',
    )
    args = parser.parse_args()
    if args.buffer_hours < 0:
        parser.error('--buffer-hours must be zero or greater')
    if args.cleanup_logs is not None and args.cleanup_logs < 0:
        parser.error('--cleanup-logs must be zero or greater')
    return args


async def print_stats(organizer_id: str | None) -> None:
    use_case = GetArchiveStatsUseCase(inventory_store=container.inventory_store())
    stats = await use_case.get_stats(organizer_id=organizer_id)
    print('📊 Archive statistics')
    print(f'   active:    {stats.active}')
    print(f'   archived:  {stats.archived}')
    print(f'   cancelled: {stats.cancelled}')
    print(f'   draft:     {stats.draft}')
    print(f'   total:     {stats.total}')
    print(f'   archive rate: {stats.archive_rate}%')


async def cleanup_logs(days_to_keep: int) -> None:
    use_case = CleanupArchiveLogsUseCase(archive_store=container.archive_store())
    deleted = await use_case.cleanup(days_to_keep=days_to_keep)
    print(f'🧹 Deleted {deleted} archive log entries older than {days_to_keep} days')


async def archive(buffer_hours: float, organizer_id: str | None, dry_run: bool) -> int:
    inventory_store = container.inventory_store()
    dispatcher = container.notification_dispatcher()
    use_case = ArchiveBatchUseCase(
        inventory_store=inventory_store,
        archive_event=ArchiveEventUseCase(
            inventory_store=inventory_store,
            archive_store=container.archive_store(),
            ledger=container.inventory_ledger(),
            notification_dispatcher=dispatcher,
        ),
    )

    # Archive notifications go out through the same worker the API runs in its lifespan
    async with anyio.create_task_group() as tg:
        tg.start_soon(dispatcher.run)
        try:
            result = await use_case.archive_batch(
                buffer_hours=buffer_hours, organizer_id=organizer_id, dry_run=dry_run
            )
        finally:
            # Closing lets the worker drain what is queued and return
            await dispatcher.close()

    mode = ' (dry run)' if dry_run else ''
    print(f'🗃️ Scanned {result.scanned} active events, {result.eligible} eligible{mode}')
    for outcome in result.outcomes:
        line = f'   {STATUS_ICONS[outcome.status]} {outcome.event_id} {outcome.event_name}'
        if outcome.error:
            line += f' - {outcome.error}'
        print(line)

    if not dry_run:
        print(f'✅ Archived {result.archived}, ❌ failed {result.failed}')
    return result.failed


async def main() -> int:
    args = parse_args()
    failed = 0

    try:
        if args.stats:
            await print_stats(args.organizer_id)
        elif args.cleanup_logs is not None:
            await cleanup_logs(args.cleanup_logs)
        else:
            failed = await archive(args.buffer_hours, args.organizer_id, args.dry_run)
    except Exception as e:
        print(f'❌ Archive run failed: {e}')
        return 1
    finally:
        if settings.STORAGE_BACKEND == 'postgres':
            await dispose_engine()

    return 2 if failed else 0


if __name__ == '__main__':
    sys.exit(anyio.run(main))
