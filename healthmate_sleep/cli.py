"""
Command line interface for logging and analyzing sleep sessions.
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date, datetime

from pydantic import ValidationError

from healthmate_sleep.config.config_manager import ConfigManager
from healthmate_sleep.core.exceptions import SleepTrackerError
from healthmate_sleep.core.models.data_models import SleepGoalsUpdate
from healthmate_sleep.core.models.output_models import ChartPeriod
from healthmate_sleep.core.reporting.report_generator import create_markdown_report, render_markdown_report
from healthmate_sleep.core.services.sleep_service import SleepService

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='healthmate-sleep',
        description='Log sleep sessions and analyze sleep patterns'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration file (defaults to the bundled config.yaml)'
    )

    parser.add_argument(
        '--data-dir',
        type=str,
        default=None,
        help='Directory holding the session and goals files'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    log_parser = subparsers.add_parser('log', help='Log a night of sleep')
    log_parser.add_argument('bedtime', help='Bedtime as HH:MM')
    log_parser.add_argument('wake_time', help='Wake time as HH:MM')
    log_parser.add_argument('--date', type=date.fromisoformat, default=None,
                            help='Date the night is filed under (default: today)')
    log_parser.add_argument('--notes', type=str, default=None, help='Optional notes')

    delete_parser = subparsers.add_parser('delete', help='Delete a session by id')
    delete_parser.add_argument('session_id')

    goals_parser = subparsers.add_parser('goals', help='Show or update sleep goals')
    goals_parser.add_argument('--bedtime', type=str, default=None)
    goals_parser.add_argument('--wake-time', type=str, default=None)
    goals_parser.add_argument('--quality', type=int, default=None)
    goals_parser.add_argument('--target-hours', type=float, default=None)

    chart_parser = subparsers.add_parser('chart', help='Print chart data for a period')
    chart_parser.add_argument('period', choices=[p.value for p in ChartPeriod])

    subparsers.add_parser('stats', help='Print rolling statistics')
    subparsers.add_parser('insights', help='Print current insights')

    report_parser = subparsers.add_parser('report', help='Generate a Markdown report')
    report_parser.add_argument('--period', choices=[p.value for p in ChartPeriod], default=ChartPeriod.WEEK.value)
    report_parser.add_argument('--output-dir', type=str, default=None,
                               help='Write the report here instead of printing it')

    export_parser = subparsers.add_parser('export', help='Export all data as JSON')
    export_parser.add_argument('--output', type=str, default=None, help='File to write (default: stdout)')

    import_parser = subparsers.add_parser('import', help='Import data from a JSON export')
    import_parser.add_argument('input', help='JSON export file')

    clear_parser = subparsers.add_parser('clear', help='Remove all sessions and goals')
    clear_parser.add_argument('--yes', action='store_true', help='Confirm removal')

    return parser.parse_args(argv)


def setup_logging(config):
    logging.basicConfig(
        level=getattr(logging, str(config.get('logging.level', 'INFO')).upper(), logging.INFO),
        format=config.get('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
    )


def _print_json(payload):
    print(json.dumps(payload, indent=2))


async def run_command(args, service):
    """Execute a parsed command against the service"""
    await service.refresh()

    if args.command == 'log':
        session = await service.log_sleep(args.date or date.today(), args.bedtime, args.wake_time, args.notes)
        _print_json(session.model_dump(mode='json', by_alias=True))

    elif args.command == 'delete':
        if not await service.delete_session(args.session_id):
            print(f"No session with id {args.session_id}")
            return 1
        print(f"Deleted session {args.session_id}")

    elif args.command == 'goals':
        update = SleepGoalsUpdate(
            bedtime=args.bedtime,
            wake_time=args.wake_time,
            quality=args.quality,
            target_sleep_hours=args.target_hours,
        )
        goals = service.goals
        if update.model_dump(exclude_none=True):
            goals = await service.update_goals(update)
        _print_json(goals.model_dump(mode='json', by_alias=True))

    elif args.command == 'chart':
        _print_json([b.model_dump(mode='json', by_alias=True) for b in service.chart_data(args.period)])

    elif args.command == 'stats':
        _print_json(service.stats().model_dump(mode='json', by_alias=True))

    elif args.command == 'insights':
        _print_json([i.model_dump(mode='json', by_alias=True) for i in service.insights()])

    elif args.command == 'report':
        now = datetime.now()
        stats, insights = service.stats(now), service.insights(now)
        chart = service.chart_data(args.period, now)
        if args.output_dir:
            path = create_markdown_report(stats, insights, service.goals, args.output_dir, chart, now)
            print(f"Report saved to {path}")
        else:
            print(render_markdown_report(stats, insights, service.goals, chart, now))

    elif args.command == 'export':
        data = await service.export_data()
        if args.output:
            with open(args.output, 'w') as f:
                f.write(data)
            logger.info(f"Exported sleep data to {args.output}")
        else:
            print(data)

    elif args.command == 'import':
        with open(args.input, 'r') as f:
            count = await service.import_data(f.read())
        print(f"Imported {count} sessions")

    elif args.command == 'clear':
        if not args.yes:
            print("Refusing to clear data without --yes")
            return 1
        await service.clear_all()
        print("All sleep data cleared")

    return 0


def main(argv=None):
    """Main entry point for the healthmate-sleep command."""
    args = parse_args(argv)

    overrides = {'storage.data_dir': args.data_dir} if args.data_dir else None
    config = ConfigManager(args.config, overrides=overrides)
    setup_logging(config)

    service = SleepService.from_config(config)

    try:
        return asyncio.run(run_command(args, service))
    except SleepTrackerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error(f"File error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
