from django.apps import AppConfig


class CoreConfig(AppConfig):
    """
    Configuration for Core application

    This app contains the reference data the workflow engine reads:
        - Centre (where sales agents sit)
        - Language (what agents speak)
        - LeadSource (where leads come from)
        - Status (lead status, lead substatus, account status)
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'
