#!/usr/bin/env python
# ==============================================================================
# LEAD PIPELINE - DJANGO MANAGEMENT SCRIPT
#
# Common commands:
# - python manage.py migrate            # Apply migrations (seeds statuses and sources)
# - python manage.py seed_workflow      # Re-seed statuses and lead sources
# - python manage.py createsuperuser    # Create admin user
# - python manage.py test --settings=config.settings_test
# ==============================================================================

import os
import sys


def main():
    """Run administrative tasks"""

    # Points to config/settings.py
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
