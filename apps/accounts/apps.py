from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AccountsConfig(AppConfig):
    """
    Configuration class for accounts app

    Holds the custom User model (agents, managers, admins) and the
    Directory Service the lead workflow uses to find eligible agents.
    """

    # BigAutoField = 64-bit integer primary keys
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.accounts'

    # Human-readable app name (shown in admin panel)
    verbose_name = _('Accounts')
