from django.core.management.base import BaseCommand
from django.db import transaction


class Command(BaseCommand):
    help = 'Recount cabins for every location and repair cabins_count'

    def handle(self, *args, **options):
        from cabins.models import Location

        fixed = 0
        with transaction.atomic():
            for location in Location.objects.all():
                stored = location.cabins_count
                actual = location.refresh_cabins_count()
                if stored != actual:
                    fixed += 1
                    self.stdout.write(
                        self.style.SUCCESS(f"  ✓ {location.name}: {stored} → {actual}")
                    )
                else:
                    self.stdout.write(f"  - {location.name}: {actual}")

        self.stdout.write("")
        if fixed:
            self.stdout.write(self.style.SUCCESS(f"Total: {fixed} location(s) repaired"))
        else:
            self.stdout.write("All cabin counts are correct.")
