import uuid

from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = (
        "Re-derives estimated/remaining time, progress and priorities of tasks "
        "and project versions from their subtasks. "
        "Safe to run repeatedly: with unchanged subtasks it writes the same values."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            'versions',
            nargs='*',
            metavar='VERSION_ID',
            help='Project versions to rebuild. Defaults to all versions.',
        )
        parser.add_argument(
            '--database',
            default=None,
            help='Database alias to use.',
        )

    def handle(self, *args, **options):
        from infrastructure.container import build_recalculation_orchestrator

        orchestrator = build_recalculation_orchestrator(using=options['database'])

        if options['versions']:
            try:
                version_ids = [uuid.UUID(v) for v in options['versions']]
            except ValueError as exc:
                raise CommandError(f'Invalid version id: {exc}')
        else:
            version_ids = orchestrator.store.list_version_ids()

        if not version_ids:
            self.stdout.write(self.style.SUCCESS('No project versions - nothing to do.'))
            return

        failed = 0
        for version_id in version_ids:
            report = orchestrator.rebuild_version(version_id)
            if report.ok:
                self.stdout.write(f'Version {version_id}: {len(report.completed_steps)} steps')
            else:
                failed += 1
                operations = ', '.join(f.operation for f in report.failures)
                self.stdout.write(self.style.WARNING(f'Version {version_id}: failed steps: {operations}'))

        self.stdout.write(self.style.SUCCESS(
            f'Done: rebuilt {len(version_ids) - failed} of {len(version_ids)} versions.'
        ))
        if failed:
            raise CommandError(f'{failed} version(s) had failed steps, see log for details.')
